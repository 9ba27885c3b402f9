class SearchError(Exception):
    """Базовая ошибка подсистемы поиска"""


class InvalidCursorError(SearchError, ValueError):
    """Курсор пагинации поврежден или сформирован не этим сервисом"""


class IndexingError(SearchError):
    """Не удалось построить или сохранить поисковый документ поста.

    Ошибка фатальна для записи, которая вызвала индексацию: пост без
    поискового документа считается несогласованным состоянием.
    """
