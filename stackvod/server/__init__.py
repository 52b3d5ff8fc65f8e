"""
This module used for http server of stackvod

Each command contains params set described in it's handler (for example create_project: CreateProjectParams).
Handlers deserialize json into those params and serialize responses the same way.

For incoming request it takes stackvod service instance (core/service) from the application and runs
'enable', 'build' or any other commands. Errors of the service are rendered by server/errors.
"""
