import logging
from abc import ABC, abstractmethod

import requests

from esg_portal.errors import IntegrationError
from esg_portal.scoring import MetricInput, as_number

logger = logging.getLogger(__name__)


class ExternalDataSource(ABC):
    """A system that supplies ESG metrics (ERP, HR, ...)."""

    kind = ""

    def __init__(self, system):
        self.system = system

    @abstractmethod
    def fetch(self, reporting_year=None):
        """Return a list of MetricInput pulled from the source."""

    def describe(self):
        return {"kind": self.kind, "system": self.system, "source": type(self).__name__}


class HTTPDataSource(ExternalDataSource):
    """Shared plumbing for JSON-over-HTTP connectors."""

    def __init__(self, base_url, api_key, system, timeout=15, session=None):
        super().__init__(system)
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def headers(self):
        return {"Authorization": f"Bearer {self.api_key}", "Accept": "application/json"}

    def get_json(self, endpoint, params=None):
        url = f"{self.base_url}{endpoint}"
        try:
            response = self.session.get(url, headers=self.headers(), params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            logger.error(f"{self.system} request failed: {url} - {e}")
            raise IntegrationError(self.system, f"request to {endpoint} failed: {e}") from e
        except ValueError as e:
            logger.error(f"{self.system} returned invalid JSON from {url}")
            raise IntegrationError(self.system, f"invalid JSON from {endpoint}") from e
        if not isinstance(data, dict):
            raise IntegrationError(self.system, f"unexpected payload from {endpoint}")
        return data


class StaticDataSource(ExternalDataSource):
    """Fixed metrics, for demos and tests. `metrics` is {category: {name: (value, unit)}}."""

    def __init__(self, system, kind, metrics):
        super().__init__(system)
        self.kind = kind
        self.metrics = metrics

    def fetch(self, reporting_year=None):
        return to_metric_inputs(self.metrics, reporting_year)


def to_metric_inputs(metrics, reporting_year=None):
    """{category: {name: (value, unit)}} -> [MetricInput], dropping non-numeric values."""
    inputs = []
    for category, values in metrics.items():
        for name, (value, unit) in values.items():
            number = as_number(value)
            if number is None:
                continue
            inputs.append(MetricInput(
                category=category,
                metric_name=name,
                value=number,
                unit=unit,
                reporting_year=reporting_year,
            ))
    return inputs
