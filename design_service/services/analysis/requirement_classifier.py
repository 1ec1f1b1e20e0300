"""
Keyword detection of UI-area signals in a requirement.

Pure and deterministic; no remote calls.
"""
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Union

from design_service.models.schemas.design import Prompt

PromptInput = Union[Prompt, dict]


@dataclass(frozen=True)
class UIArea:
    key: str
    label: str
    pattern: "re.Pattern[str]"
    is_layout: bool = False

    def matches(self, text: str) -> bool:
        return bool(self.pattern.search(text))


# Latin keywords match whole words only; CJK text has no word breaks
def _words(*words: str) -> str:
    return r"(?<![a-z])(?:" + "|".join(words) + r")(?![a-z])"


# Detection order is also the order of the returned labels
UI_AREAS: List[UIArea] = [
    UIArea("table", "Table area", re.compile(r"表格|列表|数据表格|" + _words("tables?", "lists?"))),
    UIArea(
        "search",
        "Search area",
        re.compile(r"搜索|查询|筛选|" + _words("search(?:es|ing)?", "filters?", "filtering")),
    ),
    UIArea(
        "detail",
        "Detail area",
        re.compile(r"详情|弹窗|抽屉|详情页|" + _words("modals?", "drawers?")),
    ),
    UIArea(
        "header",
        "Header area",
        re.compile(r"头部|导航|" + _words("headers?", "navs?", "navbars?", "navigation")),
        is_layout=True,
    ),
    UIArea("sidebar", "Sidebar area", re.compile(r"侧边栏|侧栏|" + _words("sidebars?")), is_layout=True),
    UIArea("footer", "Footer area", re.compile(r"底部|" + _words("footers?")), is_layout=True),
    # A search/filter form belongs to the search area
    UIArea(
        "form",
        "Form area",
        re.compile(r"(?<!搜索)(?<!查询)(?<!筛选)表单|(?<!search )(?<!filter )" + _words("forms?")),
    ),
    UIArea("card", "Card area", re.compile(r"卡片|" + _words("cards?"))),
    UIArea("tabs", "Tab area", re.compile(r"标签页|" + _words("tabs?"))),
]

_AREAS_BY_LABEL = {area.label: area for area in UI_AREAS}


def _segment_text(segment: PromptInput) -> Optional[str]:
    if isinstance(segment, Prompt):
        return segment.text if segment.type == "text" else None
    if isinstance(segment, dict) and segment.get("type") == "text":
        return segment.get("text")
    return None


def text_segments(prompt: Iterable[PromptInput]) -> List[str]:
    return [text for text in (_segment_text(p) for p in prompt or []) if text]


def combined_text(prompt: Iterable[PromptInput]) -> str:
    """Lowercased text of every text segment, space-joined"""
    return " ".join(text_segments(prompt)).lower()


def requirement_text(prompt: Iterable[PromptInput]) -> str:
    """Text segments as written, one per line (used in generation requests)"""
    return "\n".join(text_segments(prompt))


def detect_ui_areas(text: str) -> List[str]:
    """Ordered labels of every UI area whose keywords appear in ``text``"""
    lowered = (text or "").lower()
    return [area.label for area in UI_AREAS if area.matches(lowered)]


def is_layout_area(label: str) -> bool:
    area = _AREAS_BY_LABEL.get(label)
    return bool(area and area.is_layout)


def classify(prompt: Iterable[PromptInput]) -> List[str]:
    return detect_ui_areas(combined_text(prompt))
