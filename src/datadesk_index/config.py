ORGANIZATION = "data-desk-eco"

# Base URL under which each repository's GitHub Pages notebook is served
SITE_URL = "https://research.datadesk.eco"

DATABASE_FILE = "data/data.duckdb"

PROJECTS_TABLE = "projects"

LAST_UPDATED_FILE = "data/last_updated.json"

# Repository whose latest commit date is stamped into LAST_UPDATED_FILE
INDEX_REPOSITORY = "data-desk-eco/data-desk-eco.github.io"


def index_repo_name(org: str) -> str:
    """Name of the organization's own GitHub Pages site repository"""
    return f"{org}.github.io"
