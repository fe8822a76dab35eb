from .views import ItemsQuery, ItemsView

__all__ = [
    "ItemsQuery",
    "ItemsView",
]
