from typing import NamedTuple, Optional


class TempSettings(NamedTuple):
    """
    The tunable parameters of the temporary file and directory creation.

    Parameters
    ----------
    max_attempts
        The maximal number of generated names tried before giving up. The same bound applies to files and directories.
    file_mode
        The permission bits of the created files.
    dir_mode
        The permission bits of the created directories.
    """

    max_attempts: int = 10
    file_mode: int = 0o600
    dir_mode: int = 0o700


DEFAULT_SETTINGS = TempSettings()


def get_settings_errors(settings: object) -> list[str]:
    """
    Collect the problems of a settings value.

    Parameters
    ----------
    settings
        The value to check.

    Returns
    -------
    v
        The descriptions of the found problems. Empty if the settings are valid.
    """
    if not isinstance(settings, TempSettings):
        return [f"The settings are not a TempSettings instance. Value: {settings!r}"]

    errors = []
    if not _is_strict_int(settings.max_attempts) or settings.max_attempts < 1:
        errors.append(
            f"The maximal number of attempts is not a positive integer. Value: {settings.max_attempts!r}"
        )

    for field_name in ["file_mode", "dir_mode"]:
        mode = getattr(settings, field_name)
        if not _is_strict_int(mode) or not (0 <= mode <= 0o7777):
            errors.append(
                f'The permission bits for "{field_name}" are not in the 0o0000-0o7777 range. Value: {mode!r}'
            )

    return errors


def resolve_settings(settings: Optional[TempSettings]) -> TempSettings:
    """
    Return the default settings if none are given, otherwise validate the given settings.

    Raises
    ------
    ValueError
        If the given settings are invalid.
    """
    if settings is None:
        return DEFAULT_SETTINGS

    errors = get_settings_errors(settings)
    if len(errors) > 0:
        raise ValueError(f"Incorrect temporary resource settings. Errors: {errors}")

    return settings


def _is_strict_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
