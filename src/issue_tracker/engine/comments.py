"""Comment service: add, list, author-only edit, and own-or-privileged delete."""

from __future__ import annotations

from loguru import logger

from ..domain.models import Comment, Identity
from ..errors import NotFoundError, ValidationFailedError
from ..policy import Action, authorize
from ..storage.container import Container
from ..utils import _now_iso
from .common import require_text


class CommentService:
    """Comments on tasks.  Editing is author-only; deletion also allowed for leads and admins."""

    def __init__(self, container: Container) -> None:
        self._c = container

    def _content(self, content: str) -> str:
        if not require_text(content):
            raise ValidationFailedError("Comment content is required", details={"fields": ["content"]})
        return content.strip()

    def _get(self, comment_id: str) -> Comment:
        comment = self._c.comments.get(comment_id)
        if comment is None:
            raise NotFoundError("Comment not found")
        return comment

    def list_comments(self, task_id: str) -> list[Comment]:
        if self._c.tasks.get(task_id) is None:
            raise NotFoundError("Task not found")
        return self._c.comments.for_task(task_id)

    def add_comment(self, actor: Identity, task_id: str, content: str) -> Comment:
        text = self._content(content)
        if self._c.tasks.get(task_id) is None:
            raise NotFoundError("Task not found")
        author = self._c.users.get(actor.id)
        comment = Comment(
            task_id=task_id,
            user_id=actor.id,
            user_name=author.name if author else "Unknown",
            content=text,
        )
        self._c.comments.upsert(comment)
        logger.info("Comment {} added to task {} by {}", comment.id, task_id, actor.id)
        return comment

    def edit_comment(self, actor: Identity, comment_id: str, content: str) -> Comment:
        text = self._content(content)
        comment = self._get(comment_id)
        authorize(
            actor, Action.EDIT_COMMENT, owns=comment.user_id == actor.id,
            message="You can only edit your own comments",
        )
        comment.content = text
        comment.is_edited = True
        comment.updated_at = _now_iso()
        self._c.comments.upsert(comment)
        return comment

    def delete_comment(self, actor: Identity, comment_id: str) -> None:
        comment = self._get(comment_id)
        authorize(
            actor, Action.DELETE_COMMENT, owns=comment.user_id == actor.id,
            message="You can only delete your own comments",
        )
        self._c.comments.delete(comment.id)
        logger.info("Comment {} deleted by {}", comment.id, actor.id)
