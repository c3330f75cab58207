"""Request context.

trace_id текущего HTTP запроса: попадает в логи и в заголовок ответа.
"""

from contextvars import ContextVar
from uuid import uuid4

TRACE_ID_HEADER = "X-Trace-Id"

trace_id_var: ContextVar[str] = ContextVar("trace_id", default="")


def get_trace_id() -> str:
    """Получить trace_id запроса, при отсутствии создать новый.

    Returns:
        Строка trace_id.

    """
    trace_id = trace_id_var.get()
    if not trace_id:
        trace_id = uuid4().hex
        trace_id_var.set(trace_id)
    return trace_id


def set_trace_id(trace_id: str | None) -> str:
    """Установить trace_id (из заголовка клиента или новый).

    Args:
        trace_id: Значение из заголовка X-Trace-Id или None.

    Returns:
        Установленный trace_id.

    """
    value = trace_id or uuid4().hex
    trace_id_var.set(value)
    return value
