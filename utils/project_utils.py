import json
import logging
from typing import Any, Dict, List

import pandas as pd

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = [
    "title",
    "tagline",
    "devpost_url",
    "hackathon_name",
    "hackathon_url",
    "github_url",
    "website_url",
    "team_size",
    "technologies",
    "team_members",
    "awards",
    "engagement",
    "created_at",
    "updated_at",
]


def save_projects_to_csv(projects: List[Dict[str, Any]], filename: str) -> int:
    """
    Save stored project rows to a CSV file.

    Args:
        projects (List[Dict[str, Any]]): Rows as returned by the repository.
        filename (str): The name of the CSV file to save to.

    Returns:
        int: The number of rows written.
    """
    if not projects:
        logger.info("No projects to save.")
        return 0

    # Convert any dict/list fields to JSON strings for CSV compatibility
    cleaned = []
    for project in projects:
        row = {}
        for key in EXPORT_COLUMNS:
            value = project.get(key)
            row[key] = json.dumps(value) if isinstance(value, (dict, list)) else value
        cleaned.append(row)

    df = pd.DataFrame(cleaned, columns=EXPORT_COLUMNS)
    df.to_csv(filename, index=False)
    logger.info(f"Saved {len(df)} projects to '{filename}'.")
    return len(df)
