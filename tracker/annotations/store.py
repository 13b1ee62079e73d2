from __future__ import annotations

import logging
import threading
from typing import Any

from pydantic import TypeAdapter

from .backends import KeyValueBackend
from .config import DEFAULT_ANNOTATION_CONFIG, AnnotationConfig
from .models import Annotation, AnnotationUpdate

logger = logging.getLogger(__name__)

_MAPPING_ADAPTER = TypeAdapter(dict[int, Annotation])


class AnnotationStore:
    """
    Owns every user annotation and persists the full mapping on each change.

    Lookups for ids that were never annotated return the default annotation;
    nothing here raises for an unknown id.
    """

    def __init__(
        self,
        backend: KeyValueBackend,
        config: AnnotationConfig = DEFAULT_ANNOTATION_CONFIG,
    ) -> None:
        self._backend = backend
        self._key = config.storage_key
        self._lock = threading.RLock()
        self._annotations: dict[int, Annotation] = self._load()

    def _load(self) -> dict[int, Annotation]:
        try:
            raw = self._backend.get(self._key)
            if raw is None:
                return {}
            return _MAPPING_ADAPTER.validate_python(raw)
        except (OSError, ValueError):
            logger.warning(
                "Stored annotations under %r are unreadable, starting empty",
                self._key,
                exc_info=True,
            )
            return {}

    def _persist(self, annotations: dict[int, Annotation]) -> None:
        self._backend.set(
            self._key,
            {str(rid): a.model_dump(by_alias=True) for rid, a in annotations.items()},
        )

    def get(self, restaurant_id: int) -> Annotation:
        stored = self._annotations.get(restaurant_id)
        return stored.model_copy() if stored is not None else Annotation()

    def all(self) -> dict[int, Annotation]:
        return {rid: a.model_copy() for rid, a in self._annotations.items()}

    def update(
        self,
        restaurant_id: int,
        partial: AnnotationUpdate | dict[str, Any],
    ) -> Annotation:
        """Merge ``partial`` into the current annotation and persist everything."""
        if not isinstance(partial, AnnotationUpdate):
            partial = AnnotationUpdate.model_validate(partial)

        # Read, merge, persist and swap under one lock
        with self._lock:
            merged = Annotation.model_validate({
                **self.get(restaurant_id).model_dump(),
                **partial.model_dump(exclude_unset=True, exclude_none=True),
            })
            annotations = {**self._annotations, restaurant_id: merged}

            # Only swap in the new mapping once the backend accepted it
            self._persist(annotations)
            self._annotations = annotations
        return merged.model_copy()

    def clear_all(self) -> None:
        with self._lock:
            self._backend.delete(self._key)
            self._annotations = {}
        logger.info("Cleared all annotations")
