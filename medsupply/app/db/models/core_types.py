import enum

class IssueStatus(str, enum.Enum):
    draft = "Draft"
    approved = "Approved"

class IssueNoFormat(str, enum.Enum):
    year = "year"   # ISS-2024-000007
    date = "date"   # ISS-20240301-7

class CatalogSource(str, enum.Enum):
    db = "db"
    api = "api"
