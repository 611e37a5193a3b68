"""File-backed history of generated images.

The history is a JSON object keyed by generator id. Each generator keeps an
ordered list of image metadata records. The file is rewritten in full on every
mutation (temp file + rename). Mutations are serialized with an asyncio lock,
which protects callers sharing one store in one process; separate processes
writing the same file can still lose updates. Disk work runs in a worker
thread so the event loop is not blocked.
"""

import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

import structlog
from pydantic import ValidationError

from xibo_agent.config import Settings, settings as default_settings
from xibo_agent.schemas.history import GeneratorHistory, HistoryFile, HistoryImage

logger = structlog.get_logger(__name__)


class GeneratorNotFoundError(KeyError):
    """Raised when a generator id has no history."""

    def __init__(self, generator_id: str):
        super().__init__(generator_id)
        self.generator_id = generator_id

    def __str__(self) -> str:
        return f"Generator {self.generator_id} not found"


class ImageHistoryStore:
    """Owns the image history file and its in-memory copy."""

    def __init__(
        self,
        path: Path,
        image_base_url: str,
        image_dir: Optional[Path] = None,
    ):
        self.path = Path(path)
        self.image_base_url = image_base_url.rstrip("/")
        self.image_dir = Path(image_dir) if image_dir else self.path.parent
        self._history: Dict[str, GeneratorHistory] = {}
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ImageHistoryStore":
        settings = settings or default_settings
        store = cls(
            path=settings.image_history_file,
            image_base_url=settings.image_base_url,
            image_dir=settings.generated_dir,
        )
        store.load()
        return store

    def load(self) -> None:
        """Read the history file, dropping generators without images.

        A missing file gives an empty history; an unreadable one is logged
        and also treated as empty.
        """
        self._history = {}
        if not self.path.exists():
            return

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            parsed = HistoryFile.model_validate(raw).root
        except (OSError, ValueError, ValidationError) as e:
            logger.error("image_history_load_failed", path=str(self.path), error=str(e))
            return

        self._history = {
            generator_id: generator
            for generator_id, generator in parsed.items()
            if generator.images
        }
        logger.debug("image_history_loaded", generators=len(self._history))

    def save(self) -> None:
        """Write the whole history atomically."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            generator_id: generator.model_dump()
            for generator_id, generator in self._history.items()
        }

        fd, tmp_path = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def _delete_images(self, generator: GeneratorHistory) -> None:
        for image in generator.images:
            image_path = self.image_dir / image.filename
            try:
                image_path.unlink(missing_ok=True)
                logger.debug("image_file_deleted", path=str(image_path))
            except OSError as e:
                logger.error("image_file_delete_failed", path=str(image_path), error=str(e))

    def _require(self, generator_id: str) -> GeneratorHistory:
        generator = self._history.get(generator_id)
        if generator is None:
            raise GeneratorNotFoundError(generator_id)
        return generator

    async def start_new_generation(self, generator_id: str) -> str:
        """Reset a generator, deleting the image files of its previous run."""
        async with self._lock:
            existing = self._history.get(generator_id)
            if existing is not None:
                logger.info("image_history_reset", generator_id=generator_id)
                await asyncio.to_thread(self._delete_images, existing)

            self._history[generator_id] = GeneratorHistory()
            await asyncio.to_thread(self.save)

        logger.info("image_generation_started", generator_id=generator_id)
        return generator_id

    async def add_image(self, generator_id: str, image: Dict[str, Any]) -> HistoryImage:
        """Append an image record; its id is its 1-based position."""
        async with self._lock:
            generator = self._require(generator_id)
            record = HistoryImage(id=len(generator.images) + 1, **image)
            generator.images.append(record)
            await asyncio.to_thread(self.save)

        logger.info("image_history_added", generator_id=generator_id, image_id=record.id)
        return record

    async def end_generation(self, generator_id: str, is_success: bool = False) -> None:
        """Finish a generation; a successful one removes its image files."""
        async with self._lock:
            generator = self._require(generator_id)
            if is_success:
                await asyncio.to_thread(self._delete_images, generator)
            await asyncio.to_thread(self.save)

    def _with_urls(self, generator: GeneratorHistory) -> Dict[str, Any]:
        return {
            "images": [
                {**image.model_dump(), "imageUrl": f"{self.image_base_url}/{image.filename}"}
                for image in generator.images
            ]
        }

    def get_history(self, generator_id: str) -> Dict[str, Any]:
        """History of one generator, each image carrying its ``imageUrl``."""
        return self._with_urls(self._require(generator_id))

    def get_all_history(self) -> Dict[str, Dict[str, Any]]:
        """History of every generator, each image carrying its ``imageUrl``."""
        return {
            generator_id: self._with_urls(generator)
            for generator_id, generator in self._history.items()
        }
