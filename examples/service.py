"""A small worker showing the usual linelog setup.

Run with ``SVC=worker python examples/service.py``.
"""

import linelog
from linelog import DEBUG, INFO, caller, chain, trace_context, trap

# module-level starting point shared by every job
jobs = INFO.add("component", "jobs").with_hook(chain(caller, trace_context))


def run(job_id: int) -> None:
    job = jobs.add("job", job_id)
    job.printf("started")
    DEBUG.add("job", job_id).printf("only written with debug=True")
    if job_id % 3 == 0:
        job.error().add("retry", True).printf("job %d failed", job_id)


@trap()
def main() -> None:
    linelog.configure(tags=("host", "example-1"))
    for job_id in range(1, 5):
        run(job_id)
    try:
        linelog.fatalf("queue unavailable")
    finally:
        INFO.printf("shutting down")


if __name__ == "__main__":
    main()
