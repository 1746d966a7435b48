"""
Project Registry - Centralized configuration for all projects in the hub.

To add a new project:
1. Create the project directory and files
2. Register the blueprint in app/__init__.py
3. Add an entry to PROJECTS list below

Status:
- 'active': Linked from the homepage
- 'coming_soon': Listed on the homepage but not linked
"""

PROJECTS = [
    {
        'id': 'calculator',
        'name': 'Calculator',
        'description': 'Four-function calculator with keyboard support',
        'url': '/calculator',
        'status': 'active',
        'icon': '🧮',
        'order': 1
    },
]


def get_all_projects():
    """
    Get all projects from the registry.

    Returns:
        list: List of all projects sorted by order
    """
    return sorted(PROJECTS, key=lambda x: x['order'])


def get_project_by_id(project_id):
    """
    Get a specific project by its ID.

    Args:
        project_id (str): The project ID to look up

    Returns:
        dict: Project data or None if not found
    """
    return next((p for p in PROJECTS if p['id'] == project_id), None)


def get_homepage_items():
    """
    Get items to display on the homepage.

    Returns:
        list: Copies of the projects with an 'available' flag set from their status
    """
    items = []
    for project in get_all_projects():
        project_copy = project.copy()
        project_copy['available'] = project['status'] == 'active'
        items.append(project_copy)

    return items
