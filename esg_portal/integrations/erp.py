"""ERP connector (SAP / Oracle / NetSuite): energy use and financials."""

from esg_portal.integrations.base import HTTPDataSource, to_metric_inputs

ENERGY_ENDPOINTS = {
    "SAP": "/api/energy/consumption",
    "Oracle": "/rest/energy/data",
    "NetSuite": "/services/energy",
}
FINANCIAL_ENDPOINTS = {
    "SAP": "/api/financial/revenue",
    "Oracle": "/rest/financial/summary",
    "NetSuite": "/services/financial",
}

# Location-based grid factor applied to ERP energy totals, tCO2e per MWh
ERP_GRID_FACTOR = 0.5


class ERPConnector(HTTPDataSource):
    kind = "erp"

    def energy_endpoint(self):
        return ENERGY_ENDPOINTS.get(self.system, "/api/energy")

    def financial_endpoint(self):
        return FINANCIAL_ENDPOINTS.get(self.system, "/api/financial")

    def get_energy_data(self, start_date=None, end_date=None):
        params = {k: v for k, v in (("startDate", start_date), ("endDate", end_date)) if v}
        data = self.get_json(self.energy_endpoint(), params=params or None)
        total = data.get("total") or 0
        return {
            "total_consumption": total,
            "renewable_percentage": data.get("renewable_pct") or 0,
            "scope2_emissions": total * ERP_GRID_FACTOR,
            "period": data.get("period"),
        }

    def get_financial_data(self, year=None):
        data = self.get_json(self.financial_endpoint(), params={"year": year} if year else None)
        return {
            "revenue": data.get("revenue") or 0,
            "operating_costs": data.get("costs") or 0,
            "year": data.get("year", year),
        }

    def fetch(self, reporting_year=None):
        if reporting_year:
            energy = self.get_energy_data(f"{reporting_year}-01-01", f"{reporting_year}-12-31")
        else:
            energy = self.get_energy_data()
        financial = self.get_financial_data(reporting_year)
        return to_metric_inputs({
            "environmental": {
                "energyConsumption": (energy["total_consumption"], "MWh"),
                "renewableEnergyPercentage": (energy["renewable_percentage"], "%"),
                "scope2Emissions": (energy["scope2_emissions"], "tCO2e"),
            },
            "governance": {
                "revenue": (financial["revenue"], "USD"),
            },
        }, reporting_year)
