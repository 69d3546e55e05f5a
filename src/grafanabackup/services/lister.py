"""Dashboard discovery through the Grafana search endpoint."""

import json
from typing import List

from grafanabackup.constants import SEARCH_PATH
from grafanabackup.errors import ListError


class DashboardLister:
    """Enumerates dashboard uids in the order the search endpoint returns them."""

    def __init__(self, client, logger):
        self.client = client
        self.logger = logger

    def list(self, endpoint: str) -> List[str]:
        url = f"{endpoint}{SEARCH_PATH}"
        body = self.client.get(url)

        try:
            results = json.loads(body)
        except (ValueError, UnicodeDecodeError) as exc:
            raise ListError(f"Search response from {url} is not valid JSON: {exc}") from exc

        if not isinstance(results, list):
            raise ListError(f"Search response from {url} is not a JSON array.")

        uids = []
        for item in results:
            if not isinstance(item, dict):
                continue
            uid = item.get("uid")
            if uid is None or str(uid) == "":
                continue
            uids.append(str(uid))

        self.logger.info("Found %s dashboard(s).", len(uids))
        return uids
