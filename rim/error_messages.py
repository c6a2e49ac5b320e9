"""
Centralized error message templates for RIM.

Usage:
    from rim.error_messages import format_error

    msg = format_error('HOSTS_FILE_NOT_FOUND', path='/etc/rim/hosts')
"""

from typing import Dict


# Error message templates with placeholders
ERROR_MESSAGES: Dict[str, str] = {
    'HOSTS_FILE_NOT_FOUND': (
        "Hosts file not found: {path}\n"
        "Provide a file with one host per line formatted as <hostname>[:port],\n"
        "or pipe the host list on standard input."
    ),

    'NO_HOSTS': (
        "No hosts to poll.\n"
        "The host list is empty after removing blank lines and comments."
    ),

    'CONFIG_PARSE_ERROR': (
        "Failed to parse configuration file: {path}\n"
        "Error: {error}\n"
        "Please check the file syntax (YAML format expected)."
    ),

    'INVALID_SORT_KEY': (
        "Invalid sort key: {key}\n"
        "Valid keys: {valid_keys}\n"
        "Prefix a key with '+' to sort it in ascending order."
    ),

    'HOST_UNREACHABLE': (
        "Cannot reach host: {host}\n"
        "Please verify:\n"
        "  - The hostname/IP is correct\n"
        "  - The host is online and reachable\n"
        "  - SSH access is configured for the selected user\n"
        "Test with: ssh {host} cat /proc/net/dev"
    ),

    'RUN_INCOMPLETE': (
        "Polling was interrupted after {submitted} of {total} hosts were queued.\n"
        "Results are shown for the hosts that completed."
    ),

    'INTERNAL_ERROR': (
        "An internal error occurred: {error}\n"
        "This is likely a bug in RIM.\n"
        "Include the full error message and stack trace when reporting it."
    ),
}


def format_error(error_key: str, **kwargs) -> str:
    """
    Format an error message with the given parameters.

    Args:
        error_key: Key for the error message template.
        **kwargs: Parameters to substitute in the template.

    Returns:
        Formatted error message string.
    """
    template = ERROR_MESSAGES.get(error_key)
    if template is None:
        return f"Unknown error: {error_key}\nContext: {kwargs}"

    try:
        return template.format(**kwargs)
    except KeyError as e:
        return f"{template}\n(Missing format parameter: {e})"
