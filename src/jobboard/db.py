"""SQLite database via SQLAlchemy: the authoritative store for jobs and applications."""

from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    create_engine,
    event,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Session, joinedload, relationship, sessionmaker


class Base(DeclarativeBase):
    pass


def utcnow() -> datetime:
    """Naive UTC timestamp; the search engine reads unzoned dates as UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class JobRow(Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    location = Column(String, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    applications = relationship(
        "ApplicationRow", back_populates="job", order_by="ApplicationRow.id"
    )


class ApplicationRow(Base):
    __tablename__ = "applications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=False, index=True)
    applicant_name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    resume_url = Column(String, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    job = relationship("JobRow", back_populates="applications")


def _enable_foreign_keys(dbapi_connection, connection_record):
    # SQLite ships with FK enforcement off
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine(db_path: str = "jobboard.db"):
    """Create SQLAlchemy engine."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    event.listen(engine, "connect", _enable_foreign_keys)
    return engine


def init_db(db_path: str = "jobboard.db"):
    """Initialize database and create tables."""
    engine = get_engine(db_path)
    Base.metadata.create_all(engine)
    return engine


def get_session(engine) -> Session:
    """Create a new database session."""
    session_factory = sessionmaker(bind=engine)
    return session_factory()


def row_to_job(row: JobRow):
    """Convert a database row to a Pydantic Job model."""
    from jobboard.models import Job

    return Job(
        id=row.id,
        title=row.title,
        description=row.description,
        location=row.location,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def row_to_application(row: ApplicationRow, include_job: bool = False):
    """Convert a database row to a Pydantic Application model."""
    from jobboard.models import Application, JobSummary

    job = None
    if include_job and row.job is not None:
        job = JobSummary(id=row.job.id, title=row.job.title, location=row.job.location)

    return Application(
        id=row.id,
        job_id=row.job_id,
        applicant_name=row.applicant_name,
        email=row.email,
        resume_url=row.resume_url,
        created_at=row.created_at,
        updated_at=row.updated_at,
        job=job,
    )


def create_job(session: Session, title: str, description: str, location: str):
    """Insert a job and return it with its generated id and timestamps."""
    row = JobRow(title=title, description=description, location=location)
    session.add(row)
    session.flush()
    return row_to_job(row)


def create_application(
    session: Session,
    job_id: int,
    applicant_name: str,
    email: str,
    resume_url: str,
):
    """Insert an application. The caller checks that the job exists first."""
    row = ApplicationRow(
        job_id=job_id,
        applicant_name=applicant_name,
        email=email,
        resume_url=resume_url,
    )
    session.add(row)
    session.flush()
    return row_to_application(row)


def get_job_by_id(session: Session, job_id: int):
    """Get a single job by ID."""
    row = session.get(JobRow, job_id)
    if row:
        return row_to_job(row)
    return None


def get_job_with_applications(session: Session, job_id: int):
    """Get a job and its applications, or None."""
    from jobboard.models import JobWithApplications

    row = (
        session.query(JobRow)
        .options(joinedload(JobRow.applications))
        .filter_by(id=job_id)
        .first()
    )
    if row is None:
        return None

    job = row_to_job(row)
    return JobWithApplications(
        **job.model_dump(),
        applications=[row_to_application(a) for a in row.applications],
    )


def list_all_jobs(session: Session, newest_first: bool = True):
    """Return every job row, ordered by creation time."""
    query = session.query(JobRow)
    if newest_first:
        query = query.order_by(JobRow.created_at.desc(), JobRow.id.desc())
    else:
        query = query.order_by(JobRow.created_at.asc(), JobRow.id.asc())
    return [row_to_job(r) for r in query.all()]


def list_applications(
    session: Session,
    job_id: int | None = None,
    limit: int = 10,
    offset: int = 0,
) -> tuple[list, int]:
    """Query applications newest first with pagination. Returns (applications, total_count)."""
    query = session.query(ApplicationRow).options(joinedload(ApplicationRow.job))
    count_query = session.query(func.count(ApplicationRow.id))

    if job_id is not None:
        query = query.filter(ApplicationRow.job_id == job_id)
        count_query = count_query.filter(ApplicationRow.job_id == job_id)

    total = count_query.scalar()

    query = query.order_by(ApplicationRow.created_at.desc(), ApplicationRow.id.desc())
    rows = query.offset(offset).limit(limit).all()
    return [row_to_application(r, include_job=True) for r in rows], total
