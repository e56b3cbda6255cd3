"""Pull-request comment exports."""

from .deploy_comments import (
    COMMENT_MARKER,
    COMMENT_MARKERS,
    CommentAction,
    CommentSummary,
    build_deploy_comment,
    update_all_comments,
    update_deploy_comment,
)

__all__ = [
    "COMMENT_MARKER",
    "COMMENT_MARKERS",
    "CommentAction",
    "CommentSummary",
    "build_deploy_comment",
    "update_all_comments",
    "update_deploy_comment",
]
