# app/modules/moderation/service.py

import logging
from datetime import datetime, timezone
from typing import Callable, Optional
from uuid import UUID

from sqlalchemy.exc import OperationalError, SQLAlchemyError

from app.core.config import settings
from app.core.middleware.logging import log_moderation_event, logger
from app.core.utils.exceptions import CustomException, PersistenceFailure
from app.modules.moderation.repository import ModerationRepository


class ModerationService:
    """
    Warning and ban escalation.

    Each public write runs as a single transaction on the repository's session:
    the warning increment, its record, and (past the threshold) the ban with
    its cascading delist and session purge are committed together or not at
    all. Anything else already staged on the same session, such as a report
    row, commits or rolls back with them.
    """

    def __init__(
        self,
        moderation_repo: ModerationRepository,
        ban_threshold: Optional[int] = None,
        max_retries: Optional[int] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.moderation_repo = moderation_repo
        self.ban_threshold = settings.WARNING_BAN_THRESHOLD if ban_threshold is None else ban_threshold
        self.max_retries = settings.ESCALATION_MAX_RETRIES if max_retries is None else max_retries
        self._now = clock or (lambda: datetime.now(timezone.utc))

    async def issue_warning(self, user_id: UUID, reason: str, retry_on_transient: bool = True) -> int:
        """
        Add a warning to the user and ban them once the threshold is reached.

        Transient storage errors are retried only when `retry_on_transient` is
        set. Callers that staged other rows on the same session must pass
        False: the rollback discards those rows and a retry would commit the
        warning without them.

        Returns:
            int: The warning count after this warning.

        Raises:
            HTTPException: 404 if the user does not exist.
            PersistenceFailure: If storage fails; nothing was applied.
        """
        attempt = 0
        while True:
            try:
                warning_count = await self.moderation_repo.increment_warning_count(user_id)
                if warning_count is None:
                    await self.moderation_repo.rollback()
                    CustomException.e404_not_found("User not found.")

                await self.moderation_repo.add_warning(user_id, reason, self._now())
                banned = warning_count >= self.ban_threshold
                if banned:
                    await self._apply_ban(user_id, reason)

                await self.moderation_repo.commit()
            except OperationalError as e:
                await self._rollback("issue_warning", user_id, e)
                if retry_on_transient and attempt < self.max_retries:
                    attempt += 1
                    logger.warning(
                        f"Retrying warning after transient storage error (attempt {attempt})",
                        extra={"user_id": str(user_id), "event": "warning_retry"},
                    )
                    continue
                raise PersistenceFailure("issue_warning", e) from e
            except SQLAlchemyError as e:
                await self._rollback("issue_warning", user_id, e)
                raise PersistenceFailure("issue_warning", e) from e

            log_moderation_event(
                "user_warned", user_id, f"Warning issued ({warning_count}/{self.ban_threshold}): {reason}"
            )
            if banned:
                log_moderation_event(
                    "user_banned", user_id, "User banned after reaching warning threshold", logging.WARNING
                )
            return warning_count

    async def ban_user(self, user_id: UUID, reason: str) -> None:
        """
        Ban the user, delist all of their items and end their sessions.

        Raises:
            HTTPException: 404 if the user does not exist.
            PersistenceFailure: If storage fails; nothing was applied.
        """
        try:
            await self._apply_ban(user_id, reason)
            await self.moderation_repo.commit()
        except SQLAlchemyError as e:
            await self._rollback("ban_user", user_id, e)
            raise PersistenceFailure("ban_user", e) from e

        log_moderation_event("user_banned", user_id, f"User banned: {reason}", logging.WARNING)

    async def is_user_banned(self, user_id: UUID) -> bool:
        state = await self._get_state(user_id)
        return bool(state and state[1])

    async def get_warning_count(self, user_id: UUID) -> int:
        state = await self._get_state(user_id)
        return state[0] if state else 0

    async def _apply_ban(self, user_id: UUID, reason: str) -> None:
        if not await self.moderation_repo.mark_banned(user_id, reason, self._now()):
            await self.moderation_repo.rollback()
            CustomException.e404_not_found("User not found.")

        delisted = await self.moderation_repo.delist_items(user_id)
        revoked = await self.moderation_repo.delete_sessions(user_id)
        log_moderation_event(
            "ban_cascade", user_id, f"Ban cascade staged: {delisted} item(s) delisted, {revoked} session(s) revoked"
        )

    async def _get_state(self, user_id: UUID) -> Optional[tuple[int, bool]]:
        try:
            return await self.moderation_repo.get_moderation_state(user_id)
        except SQLAlchemyError as e:
            logger.error(
                f"Could not read moderation state: {e}",
                extra={"user_id": str(user_id), "event": "persistence_failure"},
            )
            raise PersistenceFailure("read_moderation_state", e) from e

    async def _rollback(self, operation: str, user_id: UUID, error: Exception) -> None:
        logger.error(
            f"{operation} aborted: {error}",
            extra={"user_id": str(user_id), "event": "persistence_failure"},
        )
        try:
            await self.moderation_repo.rollback()
        except SQLAlchemyError as rollback_error:
            # The transaction is gone with the connection; report the original failure.
            logger.error(
                f"Rollback after {operation} failed: {rollback_error}",
                extra={"user_id": str(user_id), "event": "persistence_failure"},
            )
