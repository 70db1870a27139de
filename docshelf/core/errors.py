"""
Иерархия ошибок docshelf.

    DocshelfError
    ├── ValidationFailure  : ссылка на несуществующую категорию, неверные критерии
    ├── NotFound           : документ не найден
    └── StorageFailure     : хранилище не смогло выполнить чтение или запись
        └── DuplicateTagRace: гонка при создании тега с тем же каноническим именем

Ядро не логирует и не подавляет ошибки: они поднимаются к вызывающему коду,
который отвечает за сообщения пользователю.
"""

from typing import Any, Dict, Optional


class DocshelfError(Exception):
    """Базовая ошибка docshelf"""

    def __init__(self, message: str, **context: Any):
        self.message = message
        self.error_type: str = self.__class__.__name__
        self.context: Dict[str, Any] = context
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_type": self.error_type,
            "message": self.message,
            "context": {k: str(v) for k, v in self.context.items()},
        }


class ValidationFailure(DocshelfError):
    """Входные данные не прошли проверку"""


class NotFound(DocshelfError):
    """Запрошенная сущность не существует"""

    def __init__(self, message: str, entity_id: Optional[int] = None, **context: Any):
        self.entity_id = entity_id
        super().__init__(message, entity_id=entity_id, **context)


class StorageFailure(DocshelfError):
    """Хранилище не смогло выполнить операцию"""


class DuplicateTagRace(StorageFailure):
    """Параллельное создание тега с тем же каноническим именем"""

    def __init__(self, tag_name: str):
        self.tag_name = tag_name
        super().__init__(f"Tag '{tag_name}' was created concurrently", tag_name=tag_name)
