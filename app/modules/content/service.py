"""Content service.

Loads and saves the tracked JSON documents in the remote repository.
Reads go through the cache and the retry engine; writes are validated first
and fall back from update to create when the file does not exist yet.
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from infrastructure.cache import Cache
from infrastructure.errors import AppError, ErrorClassifier, ErrorKind
from infrastructure.logging import get_module_logger
from infrastructure.notifications import NotificationCenter
from infrastructure.resilience import RetryConfig, RetryEngine
from integrations.remote_store import NotFoundError, RemoteFileStore
from modules.content.tracked import (
    DEFAULT_COLLECTIONS,
    TrackedCollection,
    collections_by_name,
)

logger = get_module_logger()


class ContentService:
    """Cached, retried access to the tracked content documents.

    Args:
        store: Remote file store holding the documents.
        cache: Cache for loaded documents.
        retry: Retry engine used for every remote call.
        classifier: Funnel for failures that do not come out of the engine.
        notifications: Receives save confirmations and format warnings.
        collections: Tracked collections; defaults to navigation, site and
            resources.

    Example:
        content = ContentService(store, cache, engine, classifier)
        navigation = content.load("navigation")
        content.save("navigation", navigation + [new_category])
    """

    def __init__(
        self,
        store: RemoteFileStore,
        cache: Cache,
        retry: RetryEngine,
        classifier: ErrorClassifier,
        notifications: Optional[NotificationCenter] = None,
        collections: Optional[List[TrackedCollection]] = None,
    ):
        self.store = store
        self.cache = cache
        self.retry = retry
        self.classifier = classifier
        self.notifications = notifications
        self._collections = collections_by_name(collections or DEFAULT_COLLECTIONS)

    def tracked_collections(self) -> List[TrackedCollection]:
        return list(self._collections.values())

    def collection(self, name: str) -> TrackedCollection:
        try:
            return self._collections[name]
        except KeyError:
            raise ValueError(f"Unknown collection: {name}") from None

    @staticmethod
    def _read_policy(collection: TrackedCollection) -> RetryConfig:
        # Callers decide whether a failed read is worth a notification
        return RetryConfig.network(context=f"Load {collection.name}", notify=False)

    @staticmethod
    def _write_policy(collection: TrackedCollection, notify: bool = True) -> RetryConfig:
        return RetryConfig.network(context=f"Save {collection.name}", notify=notify)

    def load(self, name: str, force: bool = False) -> Any:
        """Return the document for ``name``, from cache unless ``force``.

        An empty remote file yields the default document. A missing file
        yields the default document too, and for collections with
        ``write_default`` the default is written back.

        Raises:
            AppError: The document could not be read.
        """
        collection = self.collection(name)
        if force:
            self.cache.delete(collection.cache_key)
        return self.cache.get_or_set(
            collection.cache_key,
            lambda: self._fetch(collection),
            ttl=collection.cache_ttl,
        )

    def reload(self, name: str) -> Any:
        """Fetch ``name`` from the remote store and refresh the cache."""
        return self.load(name, force=True)

    def _fetch(self, collection: TrackedCollection) -> Any:
        try:
            content = self.retry.execute(
                lambda: self.store.get_file_content(collection.path),
                self._read_policy(collection),
            )
        except AppError as error:
            if error.code is not ErrorKind.NOT_FOUND:
                raise
            logger.info(
                "content_file_missing",
                collection=collection.name,
                path=collection.path,
                write_default=collection.write_default,
            )
            document = collection.default()
            if collection.write_default:
                self._write(collection, document, f"Create default {collection.name}")
            return document

        if not content.strip():
            return collection.default()

        try:
            document = json.loads(content)
        except ValueError as exc:
            raise self.classifier.handle(
                exc, context=f"Invalid JSON in {collection.path}", notify=False
            ) from exc

        issues = collection.validate(document)
        if issues:
            logger.warning(
                "content_validation_warning",
                collection=collection.name,
                issues=[issue.to_dict() for issue in issues],
            )
            if self.notifications is not None:
                self.notifications.warning(
                    "Data format warning",
                    f"{collection.path} may contain malformed entries",
                )

        logger.debug("content_loaded", collection=collection.name)
        return document

    def save(
        self,
        name: str,
        document: Any,
        message: Optional[str] = None,
        notify: bool = True,
    ) -> str:
        """Validate and write ``document``; returns the new revision token.

        With ``notify=False`` neither success nor failure raises a user
        notification; the caller reports the outcome.

        Raises:
            AppError: VALIDATION_ERROR when the document is invalid, or the
                classified write failure.
        """
        collection = self.collection(name)
        issues = collection.validate(document)
        if issues:
            raise self.classifier.handle_validation_error(
                issues, context=f"Save {collection.name}", notify=notify
            )

        revision = self._write(
            collection,
            document,
            message or f"Update {collection.name} data - {_now().isoformat()}",
            notify=notify,
        )
        self.cache.set(collection.cache_key, document, ttl=collection.cache_ttl)

        if notify and self.notifications is not None:
            self.notifications.success("Saved", f"{collection.name} data updated")
        return revision

    def _write(
        self,
        collection: TrackedCollection,
        document: Any,
        message: str,
        notify: bool = True,
    ) -> str:
        content = json.dumps(document, indent=2, ensure_ascii=False)

        def write() -> str:
            try:
                return self.store.update_file(collection.path, content, message)
            except NotFoundError:
                return self.store.create_file(collection.path, content, message)

        revision = self.retry.execute(write, self._write_policy(collection, notify))
        logger.info(
            "content_saved",
            collection=collection.name,
            path=collection.path,
            revision=revision,
        )
        return revision

    def latest_revision_time(self, name: str) -> Optional[datetime]:
        """Author date of the newest commit touching the collection's file."""
        collection = self.collection(name)
        commits = self.retry.execute(
            lambda: self.store.list_commits(limit=1, path=collection.path),
            self._read_policy(collection),
        )
        return commits[0].author_date if commits else None

    def invalidate(self, name: Optional[str] = None) -> None:
        """Drop cached copies of one collection, or of all of them."""
        names = [name] if name is not None else list(self._collections)
        self.cache.delete_batch(self.collection(n).cache_key for n in names)

    def cached(self) -> Dict[str, Any]:
        """Currently cached documents keyed by collection name."""
        return {
            name: self.cache.get(collection.cache_key)
            for name, collection in self._collections.items()
            if self.cache.has(collection.cache_key)
        }


def _now() -> datetime:
    return datetime.now(timezone.utc)
