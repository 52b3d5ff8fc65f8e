import httpx
from httpx import Response


class FormattedResponse:
    def __init__(self, response: Response):
        self.response = response

    @property
    def status_code(self):
        return self.response.status_code

    def text(self):
        return self.response.text

    def json(self):
        return self.response.json()

    def any_body(self):
        try:
            return self.response.json()
        except ValueError:
            return self.response.text

    def __repr__(self):
        return (f'Response(\n'
                f'  status_code={self.status_code}\n'
                f'  json={self.any_body()}\n'
                f')')


class StackvodApi:
    def __init__(self, base_url: str):
        self.base_url = base_url
        self.client = httpx.AsyncClient(timeout=30)

    async def list_units(self, kind: str):
        return FormattedResponse(await self.client.get(f'{self.base_url}/api/{kind}'))

    async def unit_action(self, kind: str, name: str, action: str):
        return FormattedResponse(await self.client.post(f'{self.base_url}/api/{kind}/{name}/{action}'))

    async def dependencies(self, name: str):
        return FormattedResponse(await self.client.get(f'{self.base_url}/api/services/{name}/dependencies'))

    async def create_project(self, params):
        return FormattedResponse(await self.client.post(f'{self.base_url}/api/projects/create', json=params))

    async def build_project(self, name: str):
        return FormattedResponse(await self.client.post(f'{self.base_url}/api/projects/{name}/build'))

    async def delete_project(self, name: str):
        return FormattedResponse(await self.client.delete(f'{self.base_url}/api/projects/{name}'))

    async def job(self, job_id: str):
        return FormattedResponse(await self.client.get(f'{self.base_url}/api/jobs/{job_id}'))

    async def cancel_job(self, job_id: str):
        return FormattedResponse(await self.client.post(f'{self.base_url}/api/jobs/{job_id}/cancel'))

    async def bulk(self, action: str):
        return FormattedResponse(await self.client.post(f'{self.base_url}/api/docker/{action}'))

    async def healthcheck(self):
        return FormattedResponse(await self.client.get(f'{self.base_url}/healthcheck'))
