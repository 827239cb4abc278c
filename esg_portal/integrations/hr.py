"""HR connector (Workday / BambooHR / ADP): workforce, diversity and safety data."""

import base64

from esg_portal.integrations.base import HTTPDataSource, to_metric_inputs

EMPLOYEE_ENDPOINTS = {
    "Workday": "/api/workers",
    "BambooHR": "/v1/employees/directory",
    "ADP": "/hr/v2/workers",
}
DIVERSITY_ENDPOINTS = {
    "Workday": "/api/workers/diversity",
    "BambooHR": "/v1/reports/custom",
    "ADP": "/hr/v2/workers/demographics",
}
SAFETY_ENDPOINTS = {
    "Workday": "/api/safety/incidents",
    "BambooHR": "/v1/time_off/requests",
    "ADP": "/hr/v2/safety/incidents",
}


class HRConnector(HTTPDataSource):
    kind = "hr"

    def headers(self):
        if self.system == "BambooHR":
            token = base64.b64encode(f"{self.api_key}:x".encode()).decode()
            return {"Authorization": f"Basic {token}", "Accept": "application/json"}
        return super().headers()

    def get_employee_data(self):
        data = self.get_json(EMPLOYEE_ENDPOINTS.get(self.system, "/api/employees"))
        return {
            "total_employees": data.get("total") or 0,
            "new_hires": data.get("newHires") or 0,
            "turnover_rate": data.get("turnoverRate") or 0,
            "avg_tenure": data.get("avgTenure") or 0,
        }

    def get_diversity_data(self):
        data = self.get_json(DIVERSITY_ENDPOINTS.get(self.system, "/api/diversity"))
        return {
            "female_percentage": data.get("female_pct") or 0,
            "minority_percentage": data.get("minority_pct") or 0,
            "age_distribution": data.get("age_dist") or {},
            "leadership_diversity": data.get("leadership_diversity") or 0,
        }

    def get_safety_data(self):
        data = self.get_json(SAFETY_ENDPOINTS.get(self.system, "/api/safety"))
        return {
            "incident_rate": data.get("incident_rate") or 0,
            "lost_time_rate": data.get("lost_time_rate") or 0,
            "training_hours": data.get("training_hours") or 0,
            "near_misses": data.get("near_misses") or 0,
        }

    def fetch(self, reporting_year=None):
        employees = self.get_employee_data()
        diversity = self.get_diversity_data()
        safety = self.get_safety_data()
        return to_metric_inputs({
            "social": {
                "totalEmployees": (employees["total_employees"], "count"),
                "newHires": (employees["new_hires"], "count"),
                "turnoverRate": (employees["turnover_rate"], "%"),
                "femaleEmployeesPercentage": (diversity["female_percentage"], "%"),
                "leadershipDiversityPercentage": (diversity["leadership_diversity"], "%"),
                "lostTimeInjuryRate": (safety["lost_time_rate"], "rate"),
                "trainingHoursPerEmployee": (safety["training_hours"], "hours"),
            },
        }, reporting_year)
