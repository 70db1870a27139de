from typing import List, Optional

from fastapi import HTTPException, status

from docshelf.domains.documents.entities import CategoryFilter, CategoryScope


def parse_category(value: Optional[str]) -> CategoryFilter:
    """Фильтр категории из параметра запроса: число, 'none' или отсутствие фильтра"""
    if value is None or not value.strip():
        return CategoryScope.ANY

    value = value.strip()
    if value.lower() == CategoryScope.UNCATEGORIZED.value:
        return CategoryScope.UNCATEGORIZED

    try:
        return int(value)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Invalid category: {value!r}"
        )


def parse_tag_ids(value: Optional[str]) -> List[int]:
    """Идентификаторы тегов через запятую; нечисловые значения пропускаются"""
    if value is None or not value.strip():
        return []

    tag_ids = []
    for part in value.split(","):
        part = part.strip()
        try:
            tag_ids.append(int(part))
        except ValueError:
            continue
    return tag_ids
