"""
Core of stackvod service.

It turns `.env` flags (SERVICE_REDIS_ENABLE=true, TOOLS_ADMINER_ENABLE=true) into running
containers and keeps a short-lived view of their state.

Enable sequence for a unit:
    - dependency: start every required dependency that is not running (recursively)
    - env: persist <NAMESPACE>_<UNIT>_ENABLE=true and read it back
    - generate: render container definitions with `stackvo.sh generate`
    - container: remove stale containers and `up -d --build` the unit's profile
    - any failure after the dependency step reverts the flag to false

Disable of a service runs the container step first (the image id is taken from
the live container), then env and generate.

Project builds run in background jobs:
> stackvo.sh generate projects
> docker compose -f generated/docker-compose.projects.yml build %project%
> docker compose -f generated/docker-compose.projects.yml up -d --no-build %project%

Used docker compose commands described in compose_interface
"""
