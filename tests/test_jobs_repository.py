import pytest

from modules.jobs import JobApplication, JobRepository, load_job_application


@pytest.fixture
def repo(client) -> JobRepository:
    repository = JobRepository(client, clock=lambda: "2025-01-02 03:04:05")
    repository.ensure_schema()
    return repository


def _job(**overrides) -> JobApplication:
    base = {
        "company_name": "Acme",
        "job_title": "Engineer",
        "job_type": "fulltime",
        "applied_date": "2025-01-02",
        "status": "applied",
    }
    base.update(overrides)
    return load_job_application(base)


def test_load_job_application_trims_and_fills_defaults() -> None:
    job = load_job_application({"company_name": "  Acme ", "job_title": "Engineer\n", "salary": 15000})
    assert job.company_name == "Acme"
    assert job.job_title == "Engineer"
    assert job.salary == "15000"
    assert job.location == ""


@pytest.mark.parametrize("raw", [{"job_title": "Engineer"}, {"company_name": "Acme", "job_title": "  "}])
def test_load_job_application_requires_company_and_title(raw) -> None:
    with pytest.raises(ValueError):
        load_job_application(raw)


def test_create_and_get(repo: JobRepository) -> None:
    job_id = repo.create(_job(salary="10k-15k", source_link="https://jobs.example.com/1"))

    record = repo.get(job_id)
    assert record["company_name"] == "Acme"
    assert record["salary"] == "10k-15k"
    assert record["created_at"] == "2025-01-02 03:04:05"
    assert record["updated_at"] == "2025-01-02 03:04:05"


def test_get_missing_returns_none(repo: JobRepository) -> None:
    assert repo.get(999) is None


def test_update(repo: JobRepository) -> None:
    job_id = repo.create(_job())

    assert repo.update(job_id, _job(status="interview")) == 1
    assert repo.get(job_id)["status"] == "interview"
    assert repo.update(job_id + 100, _job()) == 0


def test_delete(repo: JobRepository) -> None:
    job_id = repo.create(_job())
    assert repo.delete(job_id) == 1
    assert repo.delete(job_id) == 0
    assert repo.count() == 0


def test_list_all_newest_first(repo: JobRepository) -> None:
    first = repo.create(_job(company_name="Acme"))
    second = repo.create(_job(company_name="Globex"))
    assert [r["id"] for r in repo.list_all()] == [second, first]


def test_counts(repo: JobRepository) -> None:
    assert repo.count() == 0
    repo.create(_job(status="applied"))
    repo.create(_job(status="interview", job_type="remote"))
    repo.create(_job(status="interview"))
    repo.create(_job(status=""))

    assert repo.count() == 4
    assert repo.count(status="interview") == 2
    assert repo.count_by("status") == {"": 1, "applied": 1, "interview": 2}
    assert repo.count_by("job_type") == {"fulltime": 3, "remote": 1}


def test_count_by_rejects_unknown_field(repo: JobRepository) -> None:
    with pytest.raises(ValueError):
        repo.count_by("company_name; DROP TABLE jobs")
