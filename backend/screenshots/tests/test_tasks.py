from __future__ import annotations

from unittest.mock import patch

from django.core.cache import cache
from django.test import TestCase

from ..models import Group
from ..services.categorize import CategorizationPipeline
from ..services.errors import PersistenceError
from ..services.records import ImageRecords
from ..tasks import TaskResult, categorize_group_task, group_images_cache_key
from .factories import create_image, make_config


class TaskResultTests(TestCase):
    def test_render(self):
        self.assertEqual(TaskResult.ok().render(), "ok")
        self.assertEqual(TaskResult.skip("nothing_to_do").render(), "skip:nothing_to_do")
        self.assertEqual(TaskResult.error("boom").render(), "err:boom")


@patch(
    "screenshots.tasks.build_categorization_pipeline",
    side_effect=lambda: CategorizationPipeline(make_config()),
)
class CategorizeGroupTaskTests(TestCase):
    def setUp(self) -> None:
        self.group = Group.objects.create(name="Task")

    def test_categorizes_and_clears_cache(self, _build):
        image = create_image(self.group, "web-hero.png")
        cache.set(group_images_cache_key(self.group.id), ["stale"])

        outcome = categorize_group_task(str(self.group.id))

        self.assertEqual(outcome, "ok:success=1,failed=0")
        image.refresh_from_db()
        self.assertEqual(image.category, "Web Design")
        self.assertIsNone(cache.get(group_images_cache_key(self.group.id)))

    def test_nothing_to_do(self, _build):
        self.assertEqual(categorize_group_task(str(self.group.id)), "skip:nothing_to_do")

    def test_pipeline_error(self, _build):
        with patch.object(ImageRecords, "uncategorized", side_effect=PersistenceError("db down")):
            self.assertEqual(categorize_group_task(str(self.group.id)), "err:db down")
