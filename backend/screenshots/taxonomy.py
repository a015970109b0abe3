"""设计截图分类体系：固定的 17 个标签及其判别说明。"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple


@dataclass(frozen=True)
class CategoryPreset:
    """单个分类标签定义。"""

    label: str
    guideline: str

    def describe(self) -> str:
        return f"- {self.label}: {self.guideline}"


DESIGN_CATEGORIES: Tuple[CategoryPreset, ...] = (
    CategoryPreset("Typography", "Focus on text styling, fonts, type specimens"),
    CategoryPreset("UI Design", "User interface elements, buttons, forms, components"),
    CategoryPreset("App Design", "Complete mobile or desktop app screens"),
    CategoryPreset("Visual Design", "General visual compositions, posters, banners"),
    CategoryPreset("Illustration", "Hand-drawn or digital illustrations, artwork"),
    CategoryPreset("Graphic Design", "Logos, print materials, marketing graphics"),
    CategoryPreset("Motion Design", "Animation frames, transitions, motion graphics"),
    CategoryPreset("Branding", "Brand identities, style guides, brand assets"),
    CategoryPreset("Icon Design", "Icon sets, individual icons"),
    CategoryPreset("Web Design", "Website designs, landing pages"),
    CategoryPreset("Mobile Design", "Mobile app interfaces, responsive designs"),
    CategoryPreset("Dashboard Design", "Admin panels, data dashboards, analytics UIs"),
    CategoryPreset("Landing Page", "Marketing landing pages, hero sections"),
    CategoryPreset("Color Palette", "Color scheme references, palette collections"),
    CategoryPreset("Layout", "Grid systems, layout structures, wireframes"),
    CategoryPreset("Photography", "Photos, photo compositions"),
    CategoryPreset("Other", "If none of the above categories fit"),
)

CATEGORY_LABELS: Tuple[str, ...] = tuple(preset.label for preset in DESIGN_CATEGORIES)

OTHER = "Other"
UNCATEGORIZED = "Uncategorized"

# 无模型可用时的关键词规则，按顺序匹配，先命中者生效
FALLBACK_RULES: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("ui", "button", "form"), "UI Design"),
    (("app", "mobile"), "App Design"),
    (("web", "landing"), "Web Design"),
    (("logo", "brand"), "Branding"),
    (("icon",), "Icon Design"),
    (("dashboard", "admin"), "Dashboard Design"),
)


def is_valid_category(label: str) -> bool:
    return label in CATEGORY_LABELS


def category_choices() -> List[Tuple[str, str]]:
    """Django 字段使用的 choices。"""

    return [(label, label) for label in CATEGORY_LABELS]


def build_prompt() -> str:
    """生成发送给视觉模型的分类指令。"""

    guidelines = "\n".join(preset.describe() for preset in DESIGN_CATEGORIES)
    return (
        "Analyze this design screenshot and categorize it into ONE of these categories: "
        f"{', '.join(CATEGORY_LABELS)}.\n\n"
        f"Guidelines:\n{guidelines}\n\n"
        "Respond with ONLY the category name, nothing else."
    )
