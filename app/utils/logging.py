"""
Logging utilities for tracking visitor activity across the site.
"""

import logging

from flask import request

from app.projects.registry import get_project_by_id

logger = logging.getLogger(__name__)


def log_project_visit(project_name, project_display_name=None):
    """
    Log a visit to a project/page.

    Args:
        project_name (str): The project identifier (e.g., 'calculator')
        project_display_name (str, optional): Human-readable name for the description.
                                              Defaults to the registry name, then project_name.
    """
    project = get_project_by_id(project_name)
    display_name = project_display_name or (project['name'] if project else project_name)

    logger.info(
        "Anonymous user visited %s",
        display_name,
        extra={'project': project_name, 'remote_addr': request.remote_addr},
    )
