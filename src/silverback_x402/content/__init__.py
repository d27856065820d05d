from .templates import (
    ContentTemplate,
    TEMPLATES,
    CATEGORY_WEIGHTS,
    CATEGORIES,
    templates_for,
    pick_template,
    no_data_template,
    pick_weighted_category,
)
from .sinks import PostingSink, LoggingSink, MAX_POST_LENGTH

__all__ = [
    "ContentTemplate",
    "TEMPLATES",
    "CATEGORY_WEIGHTS",
    "CATEGORIES",
    "templates_for",
    "pick_template",
    "no_data_template",
    "pick_weighted_category",
    "PostingSink",
    "LoggingSink",
    "MAX_POST_LENGTH",
]
