"""List tool — named checklists per user."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from pydantic import Field

from kairos.tools.base import BaseTool, ToolParams, ToolResult

if TYPE_CHECKING:
    from kairos.lists.store import ListStore
    from kairos.notifications.context import MessageContext

_NEEDS_NAME = {"create_list", "delete_list", "get_list", "add_item", "remove_item", "toggle_item", "clear_completed"}
_NEEDS_INDEX = {"remove_item", "toggle_item"}


class ManageListParams(ToolParams):
    action: Literal[
        "get_all_lists",
        "get_list",
        "create_list",
        "delete_list",
        "add_item",
        "remove_item",
        "toggle_item",
        "clear_completed",
    ] = Field(description="The action to perform")
    list_name: str | None = Field(default=None, description="Name of the list")
    item_text: str | None = Field(default=None, description="Text of the item, for add_item")
    item_index: int | None = Field(
        default=None,
        description="1-based item number as shown by get_list, for remove_item and toggle_item",
    )


class ListTool(BaseTool):
    name = "manage_list"
    description = (
        "Manage the user's named lists (shopping, todo, packing...). Create and "
        "delete lists, show one or all lists, add items, remove or toggle items "
        "by their number, and clear completed items."
    )
    category = "lists"
    params_model = ManageListParams

    def __init__(self, store: ListStore) -> None:
        self._store = store

    async def execute(
        self,
        action: str,
        list_name: str | None = None,
        item_text: str | None = None,
        item_index: int | None = None,
        msg_context: MessageContext | None = None,
    ) -> ToolResult:
        if msg_context is None:
            return ToolResult(error="manage_list needs a message context")
        user_id = msg_context.user_id

        if action == "get_all_lists":
            return ToolResult(text=await self._store.get_all_lists(user_id))
        if action in _NEEDS_NAME and not list_name:
            return ToolResult(error=f"list_name is required for {action}")
        if action in _NEEDS_INDEX and item_index is None:
            return ToolResult(error=f"item_index is required for {action}")

        if action == "create_list":
            text = await self._store.create_list(user_id, list_name)
        elif action == "delete_list":
            text = await self._store.delete_list(user_id, list_name)
        elif action == "get_list":
            text = await self._store.get_list(user_id, list_name)
        elif action == "add_item":
            if not item_text:
                return ToolResult(error="item_text is required for add_item")
            text = await self._store.add_item(user_id, list_name, item_text)
        elif action == "remove_item":
            text = await self._store.remove_item(user_id, list_name, item_index)
        elif action == "toggle_item":
            text = await self._store.toggle_item(user_id, list_name, item_index)
        else:
            text = await self._store.clear_completed(user_id, list_name)
        return ToolResult(text=text)
