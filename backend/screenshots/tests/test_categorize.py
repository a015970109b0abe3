from __future__ import annotations

import threading
import uuid
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from django.test import SimpleTestCase, TestCase

from ..models import Group, Image
from ..services.categorize import CategorizationPipeline, CategorizeResult
from ..services.classifier import CategoryClassifier
from ..services.errors import PersistenceError
from ..services.records import ImageRecords
from .factories import create_image, make_config


def _storage():
    storage = MagicMock()
    storage.get_public_url.side_effect = lambda path: f"https://cdn.test/{path}"
    return storage


class CategorizationPipelineTests(TestCase):
    def setUp(self) -> None:
        self.group = Group.objects.create(name="Inspiration")
        self.config = make_config()
        self.storage = _storage()

    def _pipeline(self, **kwargs) -> CategorizationPipeline:
        kwargs.setdefault("storage", self.storage)
        return CategorizationPipeline(self.config, **kwargs)

    def test_nothing_to_do_returns_empty_result(self):
        create_image(self.group, "logo.png", category="Branding")

        with patch.object(ImageRecords, "set_category") as set_category:
            result = self._pipeline().categorize(self.group.id)

        self.assertTrue(result.is_empty)
        self.assertEqual(result.to_dict(), {"message": "No uncategorized images found"})
        set_category.assert_not_called()

    def test_categorizes_uncategorized_images_with_fallback(self):
        button = create_image(self.group, "ui-button.png")
        photo = create_image(self.group, "summer-photo.png")
        branded = create_image(self.group, "app-logo.png", category="Branding")

        result = self._pipeline().categorize(self.group.id)

        self.assertEqual(result, CategorizeResult.completed(success=2, failed=0))
        self.assertEqual(
            result.to_dict(),
            {"message": "Categorization complete", "results": {"success": 2, "failed": 0}},
        )
        button.refresh_from_db()
        photo.refresh_from_db()
        branded.refresh_from_db()
        self.assertEqual(button.category, "UI Design")
        self.assertEqual(photo.category, "Other")
        self.assertEqual(branded.category, "Branding")

    def test_rerun_is_a_no_op(self):
        create_image(self.group, "ui-button.png")
        pipeline = self._pipeline()

        first = pipeline.categorize(self.group.id)
        second = pipeline.categorize(self.group.id)

        self.assertEqual((first.success, first.failed), (1, 0))
        self.assertTrue(second.is_empty)
        self.assertEqual(self.storage.get_public_url.call_count, 1)

    def test_only_touches_requested_group(self):
        other_group = Group.objects.create(name="Other")
        foreign = create_image(other_group, "ui-form.png")
        create_image(self.group, "web.png")

        result = self._pipeline().categorize(self.group.id)

        self.assertEqual(result.success, 1)
        foreign.refresh_from_db()
        self.assertIsNone(foreign.category)

    def test_classification_failure_is_isolated(self):
        broken = create_image(self.group, "a.png")
        healthy = create_image(self.group, "b.png")

        def classify(url):
            if url.endswith("/a.png"):
                raise RuntimeError("model exploded")
            return "UI Design"

        classifier = MagicMock(spec=CategoryClassifier)
        classifier.classify.side_effect = classify

        result = self._pipeline(classifier=classifier).categorize(self.group.id)

        self.assertEqual((result.success, result.failed), (1, 1))
        broken.refresh_from_db()
        healthy.refresh_from_db()
        self.assertIsNone(broken.category)
        self.assertEqual(healthy.category, "UI Design")

    def test_url_resolution_failure_is_counted(self):
        create_image(self.group, "a.png")
        create_image(self.group, "b.png")
        storage = MagicMock()
        storage.get_public_url.side_effect = [RuntimeError("bad key"), "https://cdn.test/b-ui.png"]

        result = self._pipeline(storage=storage).categorize(self.group.id)

        self.assertEqual((result.success, result.failed), (1, 1))

    def test_write_failure_is_counted(self):
        create_image(self.group, "ui-a.png")
        create_image(self.group, "ui-b.png")
        records = ImageRecords()

        with patch.object(records, "set_category", side_effect=[PersistenceError("db down"), None]):
            with self.assertLogs("screenshots.services.categorize", level="ERROR"):
                result = self._pipeline(records=records).categorize(self.group.id)

        self.assertEqual((result.success, result.failed), (1, 1))

    def test_label_outside_taxonomy_is_rejected(self):
        image = create_image(self.group, "a.png")
        classifier = MagicMock(spec=CategoryClassifier)
        classifier.classify.return_value = "Pottery"

        result = self._pipeline(classifier=classifier).categorize(self.group.id)

        self.assertEqual((result.success, result.failed), (0, 1))
        image.refresh_from_db()
        self.assertIsNone(image.category)

    def test_initial_query_failure_propagates(self):
        with patch.object(ImageRecords, "uncategorized", side_effect=PersistenceError("db down")):
            with self.assertRaises(PersistenceError):
                self._pipeline().categorize(self.group.id)


class _MemoryRecords:
    def __init__(self, names):
        self.images = [SimpleNamespace(id=uuid.uuid4(), file_path=name) for name in names]
        self.written = {}
        self._lock = threading.Lock()

    def uncategorized(self, group_id):
        return list(self.images)

    def set_category(self, image_id, category):
        if category == "Other":
            raise PersistenceError("refusing Other")
        with self._lock:
            self.written[image_id] = category


class ParallelCategorizationTests(SimpleTestCase):
    def test_worker_pool_keeps_counts_and_isolation(self):
        records = _MemoryRecords(["ui-1.png", "app-2.png", "web-3.png", "summer-4.png", "icon-5.png"])
        pipeline = CategorizationPipeline(
            make_config(workers=3),
            storage=_storage(),
            classifier=CategoryClassifier(make_config().vision),
            records=records,
        )

        result = pipeline.categorize(uuid.uuid4())

        self.assertEqual((result.success, result.failed), (4, 1))
        self.assertEqual(
            sorted(records.written.values()),
            ["App Design", "Icon Design", "UI Design", "Web Design"],
        )
