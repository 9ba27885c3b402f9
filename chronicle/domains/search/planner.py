"""
Планировщик поискового запроса.

PLANNING -> RANKED_MATCH | FALLBACK_MATCH -> FILTERED -> PAGINATED -> DONE,
с переходом RANKED_MATCH -> ERROR_RECOVERY -> FALLBACK_MATCH при ошибке
выполнения ранжированного поиска.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence, Tuple, Union

from sqlalchemy import distinct, func, literal, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql.elements import ColumnElement
from sqlalchemy.sql.selectable import Subquery

from chronicle.db.models import Post, SearchTerm
from chronicle.db.repositories.search_repository import SearchRepository
from chronicle.domains.search.entities import PlanState, SearchPage, SearchQuery
from chronicle.domains.search.filters import compose_filters
from chronicle.domains.search.paginator import Cursor, Paginator, decode_cursor
from chronicle.domains.search.ranker import NEUTRAL_SCORE, weighted_score
from chronicle.domains.search.tokenizer import TermSet, tokenize

logger = logging.getLogger(__name__)

# Ошибки выполнения, после которых поиск деградирует, а не падает
EXECUTION_ERRORS = (SQLAlchemyError, asyncio.TimeoutError)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class MatchClause:
    """Общий для обеих веток результат планирования: условие совпадения и оценка"""
    score: ColumnElement
    predicates: Tuple[ColumnElement, ...] = ()
    source: Optional[Subquery] = None
    neutral: bool = False


@dataclass(frozen=True)
class RankedPlan:
    """Ранжированный поиск: документ должен содержать все термы запроса"""
    text: str
    terms: TermSet

    def match(self) -> MatchClause:
        terms = sorted(self.terms)
        ranked = (
            select(
                SearchTerm.post_id.label("post_id"),
                weighted_score().label("score"),
            )
            .where(SearchTerm.term.in_(terms))
            .group_by(SearchTerm.post_id)
            .having(func.count(distinct(SearchTerm.term)) == len(terms))
            .subquery("ranked")
        )
        return MatchClause(score=ranked.c.score, source=ranked)

    def fallback(self) -> "FallbackPlan":
        return FallbackPlan(text=self.text)


@dataclass(frozen=True)
class FallbackPlan:
    """Подстрочный поиск по заголовку и анонсу с нейтральной оценкой"""
    text: str

    def match(self) -> MatchClause:
        needle = self.text.strip()
        return MatchClause(
            score=literal(NEUTRAL_SCORE),
            predicates=(
                or_(
                    Post.title.icontains(needle, autoescape=True),
                    Post.excerpt.icontains(needle, autoescape=True),
                ),
            ),
            neutral=True,
        )


Plan = Union[RankedPlan, FallbackPlan]


@dataclass
class PlanTrace:
    states: List[PlanState] = field(default_factory=list)

    def enter(self, state: PlanState) -> None:
        logger.debug("Search plan state: %s", state.value)
        self.states.append(state)

    def freeze(self) -> Tuple[PlanState, ...]:
        return tuple(self.states)


class QueryPlanner:
    """Выбор ветки поиска, фильтрация, пагинация и восстановление после ошибок"""

    def __init__(
        self,
        search_repository: SearchRepository,
        timeout: Optional[float] = None,
        tokenizer: Callable[[str], TermSet] = tokenize,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.search_repository = search_repository
        self.paginator = Paginator(search_repository)
        self.timeout = timeout
        self.tokenizer = tokenizer
        self.clock = clock or _utcnow

    def plan(self, text: str) -> Plan:
        """Ранжированный план при непустом множестве термов, иначе подстрочный"""
        terms = self.tokenizer(text)
        if terms:
            return RankedPlan(text=text, terms=terms)
        return FallbackPlan(text=text)

    async def run(self, query: SearchQuery) -> SearchPage:
        """Выполнение запроса; ошибки выполнения не выходят наружу"""
        if not query.text or not query.text.strip():
            return SearchPage.empty()

        cursor = decode_cursor(query.cursor) if query.cursor else None

        trace = PlanTrace()
        trace.enter(PlanState.PLANNING)
        plan = self.plan(query.text)
        filters = compose_filters(query.author_handle, query.recency, self.clock())

        # Выдача, начатая подстрочным поиском, им и продолжается
        if isinstance(plan, RankedPlan) and cursor is not None and cursor.is_fallback:
            plan = plan.fallback()

        if isinstance(plan, RankedPlan):
            trace.enter(PlanState.RANKED_MATCH)
            try:
                return await self._execute(plan, filters, cursor, query.page_size, trace)
            except EXECUTION_ERRORS:
                logger.warning(
                    "Ranked search failed, falling back to substring match",
                    exc_info=True,
                    extra={"query": query.text, "terms": sorted(plan.terms)}
                )
                trace.enter(PlanState.ERROR_RECOVERY)
                await self.search_repository.recover()
                plan = plan.fallback()

        trace.enter(PlanState.FALLBACK_MATCH)
        if cursor is not None and not cursor.is_fallback:
            logger.warning(
                "Ranked cursor cannot continue a substring match, returning an empty page",
                extra={"query": query.text}
            )
            return SearchPage.empty(states=trace.freeze())

        try:
            return await self._execute(plan, filters, cursor, query.page_size, trace)
        except EXECUTION_ERRORS:
            logger.error(
                "Fallback search failed, returning an empty page",
                exc_info=True,
                extra={"query": query.text}
            )
            await self.search_repository.recover()
            return SearchPage.empty(states=trace.freeze())

    async def _execute(
        self,
        plan: Plan,
        filters: Sequence[ColumnElement],
        cursor: Optional[Cursor],
        page_size: int,
        trace: PlanTrace
    ) -> SearchPage:
        match = plan.match()
        trace.enter(PlanState.FILTERED)
        trace.enter(PlanState.PAGINATED)

        page = await asyncio.wait_for(
            self.paginator.paginate(match, filters, cursor, page_size),
            timeout=self.timeout
        )

        trace.enter(PlanState.DONE)
        page.states = trace.freeze()
        return page
