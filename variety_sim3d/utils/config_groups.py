"""
Parameter groups for the variety simulation.

This module centralizes which parameters rebuild the particle set, which
ones reconfigure the camera, and the grouping and help text used by a
control panel.
"""

from __future__ import annotations


# =============================================================================
# Parameter Reset Keys - Changes that require rebuilding the particles
# =============================================================================

RESET_KEYS = {
    "body_count",
    "init_half_extent",
    "seed",
}


# =============================================================================
# Parameter Categories
# =============================================================================

SIMULATION_KEYS = {
    "learning_rate",
    "simulation_speed",
    "velocity_damping",
    "bounce",
    "bounds",
    "distance_floor",
}

CAMERA_KEYS = {
    "camera_fov",
    "camera_min_distance",
    "camera_max_distance",
    "camera_damping_enabled",
    "camera_damping_factor",
    "camera_rotate_speed",
    "zoom_step",
}

AUTO_ROTATE_KEYS = {
    "auto_rotate",
    "auto_rotate_radius",
    "auto_rotate_rate",
}


# =============================================================================
# Menu Groups - Organizes parameters in the control panel
# =============================================================================

MENU_GROUPS = {
    "body_count": ("Bodies", "Count"),
    "seed": ("Bodies", "Init"),
    "init_half_extent": ("Bodies", "Init"),
    "learning_rate": ("Descent", "Rate"),
    "simulation_speed": ("Descent", "Rate"),
    "velocity_damping": ("Descent", "Dynamics"),
    "bounce": ("Descent", "Dynamics"),
    "bounds": ("Descent", "Box"),
    "distance_floor": ("Descent", "Tuning"),
    "camera_fov": ("View", "Camera"),
    "camera_min_distance": ("View", "Camera"),
    "camera_max_distance": ("View", "Camera"),
    "camera_damping_enabled": ("View", "Damping"),
    "camera_damping_factor": ("View", "Damping"),
    "camera_rotate_speed": ("View", "Input"),
    "zoom_step": ("View", "Input"),
    "auto_rotate": ("View", "Auto-rotate"),
    "auto_rotate_radius": ("View", "Auto-rotate"),
    "auto_rotate_rate": ("View", "Auto-rotate"),
}


# =============================================================================
# Parameter Hints - Help text for each parameter
# =============================================================================

PARAM_HINTS = {
    "body_count": "Number of bodies (rebuilds the layout).",
    "seed": "Random seed for the initial layout.",
    "init_half_extent": "Half-size of the cube bodies start in.",
    "learning_rate": "Gradient step added to velocity each step.",
    "simulation_speed": "Simulation steps per rendered frame (fractional).",
    "velocity_damping": "Velocity kept from one step to the next.",
    "bounce": "Velocity kept (reversed) after hitting a wall.",
    "bounds": "Box half-size.",
    "distance_floor": "Smallest distance used in the potential.",
    "camera_fov": "Vertical field of view (degrees).",
    "camera_min_distance": "Minimum zoom distance.",
    "camera_max_distance": "Maximum zoom distance.",
    "camera_damping_enabled": "Let rotation coast to a stop.",
    "camera_damping_factor": "Fraction of pending rotation dropped per frame.",
    "camera_rotate_speed": "Rotation per pixel of pointer movement.",
    "zoom_step": "Zoom factor per wheel notch.",
    "auto_rotate": "Circle the camera around the origin.",
    "auto_rotate_radius": "Auto-rotation radius.",
    "auto_rotate_rate": "Auto-rotation speed (radians per ms).",
}


# =============================================================================
# Helper Functions
# =============================================================================

def get_menu_group_title(key: str) -> tuple[str | None, str | None]:
    """
    Get the menu group and subgroup for a parameter.

    Returns:
        (group_name, subgroup_name) or (None, None) if not found
    """
    group = MENU_GROUPS.get(key)
    if group is None:
        return None, None
    return group


def get_param_hint(key: str) -> str:
    return PARAM_HINTS.get(key, "")


def is_reset_required(key: str) -> bool:
    """Check if changing this parameter requires rebuilding the particles."""
    return key in RESET_KEYS


def is_camera_related(key: str) -> bool:
    return key in CAMERA_KEYS or key in AUTO_ROTATE_KEYS


def changed_keys(old: object, new: object) -> set[str]:
    """Names of the grouped parameters whose value differs between two params objects."""
    keys = set(MENU_GROUPS)
    return {k for k in keys if getattr(old, k, None) != getattr(new, k, None)}
