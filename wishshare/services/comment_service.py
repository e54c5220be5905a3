"""
Comment service - comments on items, editable and deletable by their author only.
"""

from wishshare.core import policy
from wishshare.core.errors import ServiceError
from wishshare.db.models.comment import Comment
from wishshare.db.models.user import User
from wishshare.db.repositories.block_repository import BlockRepository
from wishshare.db.repositories.comment_repository import CommentRepository
from wishshare.db.repositories.item_repository import ItemRepository
from wishshare.schemas.comment import CommentCreate, CommentUpdate
from wishshare.services.item_service import ensure_item_visible, get_item_or_404


class CommentService:
    def __init__(
        self,
        comment_repo: CommentRepository,
        item_repo: ItemRepository,
        block_repo: BlockRepository,
    ):
        self.comments = comment_repo
        self.items = item_repo
        self.blocks = block_repo

    async def _authored(self, actor: User, item_id: int, comment_id: int) -> Comment:
        comment = await self.comments.get_by_id_with_user(comment_id)
        if not comment or comment.item_id != item_id:
            raise ServiceError.not_found("Comment")
        policy.ensure(policy.can_modify_comment(actor, comment))
        return comment

    async def add(self, actor: User, item_id: int, data: CommentCreate) -> Comment:
        item = await get_item_or_404(self.items, item_id)
        await ensure_item_visible(self.blocks, actor, item)
        comment = await self.comments.add(
            Comment(item_id=item.id, user_id=actor.id, content=data.content)
        )
        return await self.comments.get_by_id_with_user(comment.id)

    async def update(
        self, actor: User, item_id: int, comment_id: int, data: CommentUpdate
    ) -> Comment:
        comment = await self._authored(actor, item_id, comment_id)
        comment.content = data.content
        await self.comments.save(comment)
        return await self.comments.get_by_id_with_user(comment_id)

    async def delete(self, actor: User, item_id: int, comment_id: int) -> None:
        comment = await self._authored(actor, item_id, comment_id)
        await self.comments.delete(comment)
