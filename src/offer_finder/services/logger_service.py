from datetime import datetime
from typing import List, Optional

import click

from ..models import LogEntry


class LoggerService:
    """Сервис для работы с логами и статусными сообщениями."""

    def __init__(self, max_logs: int = 1000, echo: bool = True):
        self._logs: List[LogEntry] = []
        self._max_logs = max_logs
        self._echo = echo

    def add_log(self, level: str, message: str) -> None:
        """Добавляет запись в лог и выводит ее в консоль."""
        log_entry = LogEntry(
            id=str(datetime.now().timestamp()),
            timestamp=datetime.now(),
            level=level,
            message=message
        )
        self._logs.insert(0, log_entry)

        # Ограничиваем количество логов
        if len(self._logs) > self._max_logs:
            self._logs = self._logs[:self._max_logs]

        if self._echo:
            if level == "ERROR":
                click.secho(message, fg="red", err=True)
            elif level == "WARNING":
                click.secho(message, fg="yellow", err=True)
            else:
                click.echo(message)

    def info(self, message: str) -> None:
        self.add_log("INFO", message)

    def warning(self, message: str) -> None:
        self.add_log("WARNING", message)

    def error(self, message: str) -> None:
        self.add_log("ERROR", message)

    def get_logs(
        self,
        level: Optional[str] = None,
        search_query: Optional[str] = None,
        limit: Optional[int] = None
    ) -> List[LogEntry]:
        """
        Получает логи с фильтрацией.

        Args:
            level: Фильтр по уровню ("INFO", "WARNING", "ERROR" или None для всех)
            search_query: Поисковый запрос
            limit: Максимальное количество записей
        """
        logs = self._logs

        if level and level != "ALL":
            logs = [log for log in logs if log.level == level]

        if search_query:
            query = search_query.lower()
            logs = [log for log in logs if query in log.message.lower()]

        if limit:
            logs = logs[:limit]

        return logs

    def clear_logs(self) -> None:
        """Очищает все логи."""
        self._logs.clear()
