def format_duration(ms) -> str:
    """Format milliseconds as 'M:SS'.

    The value is rounded to the nearest whole second before it is split, so
    59.6s shows as '1:00' rather than '0:60'.
    """
    total_seconds = int(max(ms or 0, 0) / 1000 + 0.5)
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes}:{seconds:02}"
