"""JSON file persistence for user state and static game data

DATA LAYOUT (under DATA_PATH):
- cards.json, skill_tree.json, phases.json: static data, required
- reflections.json: reflection entries, optional (missing -> [])
- user_template.json: starting profile for new users, optional
- user.json: saved user profile
"""
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from prime_officer.config import DATA_PATH, USER_FILENAME
from prime_officer.exceptions import DataLoadError, StorageError
from prime_officer.models.card import Card
from prime_officer.models.phase import Phase
from prime_officer.models.reflection import ReflectionEntry
from prime_officer.models.skill import SkillNode
from prime_officer.models.user import User

logger = logging.getLogger(__name__)

TEMPLATE_FILENAME = "user_template.json"
REFLECTIONS_FILENAME = "reflections.json"
CORRUPT_SUFFIX = ".corrupt"

_cards_adapter = TypeAdapter(List[Card])
_skill_tree_adapter = TypeAdapter(List[SkillNode])
_phases_adapter = TypeAdapter(List[Phase])
_reflections_adapter = TypeAdapter(List[ReflectionEntry])


class JsonStore:
    """Load and save prime-officer data as JSON documents"""

    def __init__(self, data_path: Path = DATA_PATH, user_filename: str = USER_FILENAME):
        self.data_path = Path(data_path)
        self.user_filename = user_filename

    @property
    def user_path(self) -> Path:
        return self.data_path / self.user_filename

    def _read_json(self, filename: str) -> Any:
        filepath = self.data_path / filename
        try:
            return json.loads(filepath.read_text(encoding="utf-8"))
        except FileNotFoundError:
            raise
        except (OSError, json.JSONDecodeError) as e:
            raise DataLoadError(
                f"Failed to load {filename}: {e}",
                path=str(filepath),
                operation="read_json",
                cause=e,
            )

    def _write_json(self, filename: str, payload: Any) -> None:
        filepath = self.data_path / filename
        tmp_path = filepath.with_suffix(filepath.suffix + ".tmp")
        try:
            self.data_path.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
            tmp_path.replace(filepath)
        except OSError as e:
            raise StorageError(
                f"Failed to write {filename}: {e}",
                path=str(filepath),
                operation="write_json",
                cause=e,
            )

    def _load_list(self, filename: str, adapter: TypeAdapter, required: bool = True) -> list:
        try:
            raw = self._read_json(filename)
        except FileNotFoundError as e:
            if not required:
                logger.info(f"{filename} not found, using empty list")
                return []
            raise DataLoadError(
                f"Required data file {filename} is missing",
                path=str(self.data_path / filename),
                operation="load_static_data",
                cause=e,
            )

        try:
            return adapter.validate_python(raw or [])
        except PydanticValidationError as e:
            raise DataLoadError(
                f"{filename} does not match the expected shape",
                path=str(self.data_path / filename),
                operation="load_static_data",
                cause=e,
            )

    async def load_static_data(self) -> Dict[str, list]:
        """Load cards, skill tree, phases and reflections

        Returns:
            {'cards': [...], 'skill_tree': [...], 'phases': [...], 'reflections': [...]}
        """
        data = {
            "cards": self._load_list("cards.json", _cards_adapter),
            "skill_tree": self._load_list("skill_tree.json", _skill_tree_adapter),
            "phases": self._load_list("phases.json", _phases_adapter),
            "reflections": await self.load_reflections(),
        }
        logger.info(
            f"Loaded {len(data['cards'])} cards, {len(data['skill_tree'])} skill nodes, "
            f"{len(data['phases'])} phases, {len(data['reflections'])} reflections"
        )
        return data

    async def load_reflections(self) -> List[ReflectionEntry]:
        return self._load_list(REFLECTIONS_FILENAME, _reflections_adapter, required=False)

    async def save_reflections(self, reflections: List[ReflectionEntry]) -> None:
        self._write_json(REFLECTIONS_FILENAME, [r.model_dump(mode="json") for r in reflections])
        logger.info(f"Saved {len(reflections)} reflections")

    async def _load_template(self) -> User:
        """Starting profile: user_template.json, else an empty user"""
        try:
            user = User.model_validate(self._read_json(TEMPLATE_FILENAME))
        except FileNotFoundError:
            logger.info("No user template found, creating empty profile")
            user = User()
        except (DataLoadError, PydanticValidationError) as e:
            logger.warning(f"Invalid user template, creating empty profile: {e}")
            user = User()

        if not user.created_at:
            user = user.model_copy(update={"created_at": datetime.now(timezone.utc).isoformat()})
        return user

    async def load_user(self) -> User:
        """Load the saved user, falling back to the template

        A missing user.json gets the template saved immediately. An unreadable
        one is moved to user.json.corrupt first and the template is returned
        unsaved, so the damaged progress is never overwritten.
        """
        try:
            return User.model_validate(self._read_json(self.user_filename))
        except FileNotFoundError:
            logger.info(f"No saved user at {self.user_path}, starting from template")
        except (DataLoadError, PydanticValidationError) as e:
            logger.warning(f"Failed to parse saved user, falling back to template: {e}")
            self._quarantine_user_file()
            return await self._load_template()

        user = await self._load_template()
        await self.save_user(user)
        return user

    def _quarantine_user_file(self) -> None:
        """Move an unreadable user.json aside as user.json.corrupt"""
        target = self.user_path.with_suffix(self.user_path.suffix + CORRUPT_SUFFIX)
        try:
            self.user_path.replace(target)
        except OSError as e:
            raise StorageError(
                f"Failed to move corrupt user file to {target}: {e}",
                path=str(self.user_path),
                operation="load_user",
                cause=e,
            )
        logger.warning(f"Corrupt user file kept at {target}")

    async def save_user(self, user: User) -> None:
        self._write_json(self.user_filename, user.model_dump(mode="json"))
        logger.debug(f"Saved user {user.id} to {self.user_path}")

    async def reset_user(self) -> User:
        """Discard the saved user and start again from the template"""
        try:
            self.user_path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise StorageError(f"Failed to delete {self.user_path}: {e}", path=str(self.user_path), cause=e)

        user = await self._load_template()
        await self.save_user(user)
        logger.info("User profile reset from template")
        return user


def get_store(data_path: Optional[Path] = None) -> JsonStore:
    """Store rooted at data_path (defaults to config.DATA_PATH)"""
    return JsonStore(data_path or DATA_PATH)
