from __future__ import annotations


class IngestionError(Exception):
    """Базовая ошибка загрузки CSV."""


class ConstructionError(IngestionError):
    """Некорректная конфигурация reader'а или использование до initialize()."""


class ParseError(IngestionError):
    """Битая строка CSV, пустой источник или несовпадение числа полей."""


class DecodeError(IngestionError):
    """Значение колонки не подходит под тип поля целевой структуры."""


class SourceError(IngestionError):
    """Не удалось получить байты из источника (диск, S3)."""


class PersistenceError(IngestionError):
    """Ошибка записи батча в БД."""
