from urllib.parse import quote

import httpx

from .error_logger import ErrorLogger


class NpmClient:
    def __init__(self, client: httpx.AsyncClient, error_logger: ErrorLogger):
        self.client = client
        self.error_logger = error_logger

    async def fetch_versions(self, package_name: str) -> list[str]:
        """
        All published version strings of `package_name`.

        Returns an empty list if the package is unknown or the registry
        cannot be reached.
        """
        # '@scope/name' must be requested as '@scope%2Fname'
        path = "/" + quote(package_name, safe="@")
        try:
            resp = await self.client.get(path)
            if resp.status_code == 404:
                return []
            resp.raise_for_status()

            versions = resp.json().get("versions") or {}
            return list(versions.keys())

        except (httpx.HTTPError, ValueError, AttributeError) as e:
            print(f"  Warning: npm lookup failed for {package_name}: {e}")
            self.error_logger.log_error(
                source=package_name,
                error_type="npm_failed",
                message=str(e),
                details={"package": package_name},
            )
            return []
