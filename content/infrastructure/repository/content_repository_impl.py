import logging
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator

from sqlalchemy import Integer, String, case, cast, func, select, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool

from content.application.port.content_repository_port import ContentRepositoryPort
from content.domain.exceptions import DuplicateKeyError, NotFoundError, StorageFailure
from content.domain.video import Video
from content.domain.visit import Visit, format_visit_timestamp, parse_visit_timestamp
from content.infrastructure.orm.models import VideoORM, VisitorORM

logger = logging.getLogger(__name__)

HEAVY_LOAD_CONNECTIONS = 40


def _is_unique_violation(exc: IntegrityError) -> bool:
    # psycopg2 reports SQLSTATE 23505, sqlite3 only has the message
    if getattr(exc.orig, "pgcode", None) == "23505":
        return True
    return "unique" in str(exc.orig).lower()


class ContentRepositoryImpl(ContentRepositoryPort):
    def __init__(self, engine: Engine, session_factory: sessionmaker, health_timeout_seconds: float = 1.0):
        self.engine = engine
        self.session_factory = session_factory
        self.health_timeout_seconds = health_timeout_seconds

    @contextmanager
    def _session(self, action: str) -> Iterator[Session]:
        db = self.session_factory()
        try:
            yield db
        except SQLAlchemyError as exc:
            db.rollback()
            raise StorageFailure(f"Failed to {action}: {exc}") from exc
        finally:
            db.close()

    def insert_video(self, video: Video) -> int:
        with self._session("save video") as db:
            orm = VideoORM(
                published_at=video.published_at,
                title=video.title,
                description=video.description,
                thumbnail_url=video.thumbnail_url,
                video_id=video.video_id,
                owner_channel_title=video.owner_channel_title,
            )
            db.add(orm)
            try:
                db.commit()
            except IntegrityError as exc:
                db.rollback()
                if not _is_unique_violation(exc):
                    raise StorageFailure(f"Failed to save video {video.video_id}: {exc.orig}") from exc
                raise DuplicateKeyError(f"Video {video.video_id} already exists") from exc
            video.id = orm.id
            return orm.id

    def find_video_by_id(self, row_id: int) -> Video:
        with self._session(f"fetch video {row_id}") as db:
            orm = db.get(VideoORM, row_id)
            if orm is None:
                raise NotFoundError(f"Video with id={row_id} not found")
            return self._to_domain(orm)

    def find_all_videos(self) -> list[Video]:
        with self._session("query videos") as db:
            rows = db.execute(select(VideoORM).order_by(VideoORM.id)).scalars().all()
            return [self._to_domain(orm) for orm in rows]

    def count_videos(self) -> int:
        with self._session("fetch total videos") as db:
            return db.execute(select(func.count(VideoORM.id))).scalar_one()

    def record_visit(self, visitor_id: str, visited_at: datetime) -> Visit:
        with self._session("record visit") as db:
            orm = VisitorORM(visitor_id=visitor_id, visited_at=format_visit_timestamp(visited_at))
            db.add(orm)
            db.commit()
            return Visit(id=orm.id, visitor_id=orm.visitor_id, visited_at=parse_visit_timestamp(orm.visited_at))

    def last_visit(self, visitor_id: str) -> datetime | None:
        with self._session("fetch last visit") as db:
            value = db.execute(
                select(func.max(VisitorORM.visited_at)).where(VisitorORM.visitor_id == visitor_id)
            ).scalar_one_or_none()
        return parse_visit_timestamp(value) if value else None

    def aggregate_visits_by_day(self) -> list[tuple[str, int]]:
        day = func.substr(VisitorORM.visited_at, 1, 10, type_=String).label("day")
        stmt = select(day, func.count(VisitorORM.id)).group_by(day).order_by(day)
        with self._session("aggregate visits per day") as db:
            return [(row[0], row[1]) for row in db.execute(stmt).all()]

    def aggregate_visits_by_half_hour(self) -> list[tuple[str, int]]:
        # YYYY-MM-DDTHH: + 00|30
        minute = cast(func.substr(VisitorORM.visited_at, 15, 2, type_=String), Integer)
        bucket = (
            func.substr(VisitorORM.visited_at, 1, 14, type_=String)
            .concat(case((minute < 30, "00"), else_="30"))
            .label("bucket")
        )
        stmt = select(bucket, func.count(VisitorORM.id)).group_by(bucket).order_by(bucket)
        with self._session("aggregate visits per 30 minutes") as db:
            return [(row[0], row[1]) for row in db.execute(stmt).all()]

    def health(self) -> dict[str, str]:
        stats: dict[str, str] = {}

        # one executor per check, so a hung ping never blocks the next one
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="db-health")
        try:
            executor.submit(self._ping).result(timeout=self.health_timeout_seconds)
        except FutureTimeoutError:
            stats["status"] = "down"
            stats["error"] = f"db down: ping timed out after {self.health_timeout_seconds}s"
            logger.error(stats["error"])
            return stats
        except Exception as exc:
            stats["status"] = "down"
            stats["error"] = f"db down: {exc}"
            logger.error(stats["error"])
            return stats
        finally:
            executor.shutdown(wait=False)

        stats["status"] = "up"
        stats["message"] = "It's healthy"

        pool = self.engine.pool
        stats["pool"] = pool.status()
        if isinstance(pool, QueuePool):
            in_use = pool.checkedout()
            overflow = max(pool.overflow(), 0)
            stats["pool_size"] = str(pool.size())
            stats["in_use"] = str(in_use)
            stats["idle"] = str(pool.checkedin())
            stats["overflow"] = str(overflow)

            if in_use > HEAVY_LOAD_CONNECTIONS:
                stats["message"] = "The database is experiencing heavy load."
            if overflow > pool.size() // 2:
                stats["message"] = (
                    "Many overflow connections are open, consider revising the connection pool settings."
                )

        return stats

    def _ping(self) -> None:
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    def close(self) -> None:
        self.engine.dispose()
        logger.info("Disconnected from database: %s", self.engine.url.render_as_string(hide_password=True))

    def _to_domain(self, orm: VideoORM) -> Video:
        return Video(
            id=orm.id,
            published_at=orm.published_at,
            title=orm.title,
            description=orm.description,
            thumbnail_url=orm.thumbnail_url,
            video_id=orm.video_id,
            owner_channel_title=orm.owner_channel_title,
        )
