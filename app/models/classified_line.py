from pydantic import BaseModel, ConfigDict


class ClassifiedLine(BaseModel):
    """
    Представляет одну непустую строку лога после классификации.

    Поля:
        timestamp: временная метка в начале строки в исходном виде
            (например, ``2025-10-25 12:00:03.789``) либо ``None``;
        level: уровень логирования в верхнем регистре (``ERROR``, ``WARN`` и т. д.)
            либо ``None``, если уровень не найден;
        message: остаток строки после удаления временной метки и уровня;
        is_stack_trace: признак строки стектрейса (``at ...``, ``File "..."``,
            ``Caused by:``), которая продолжает предыдущую ошибку.
    """

    model_config = ConfigDict(frozen=True)

    timestamp: str | None = None
    level: str | None = None
    message: str
    is_stack_trace: bool = False
