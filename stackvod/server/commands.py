API_PREFIX = '/api'

UNITS_PATH = API_PREFIX + '/{kind:services|tools|projects}'
UNIT_ACTION_PATH = UNITS_PATH + '/{name}/{action:start|stop|restart|enable|disable}'
DEPENDENCIES_PATH = API_PREFIX + '/services/{name}/dependencies'

PROJECT_CREATE_PATH = API_PREFIX + '/projects/create'
PROJECT_BUILD_PATH = API_PREFIX + '/projects/{name}/build'
PROJECT_PATH = API_PREFIX + '/projects/{name}'

JOB_PATH = API_PREFIX + '/jobs/{job_id}'
JOB_CANCEL_PATH = API_PREFIX + '/jobs/{job_id}/cancel'

DOCKER_BULK_PATH = API_PREFIX + '/docker/{action:start-all|stop-all|restart-all}'

EVENTS_PATH = API_PREFIX + '/events'
HEALTHCHECK_PATH = '/healthcheck'
