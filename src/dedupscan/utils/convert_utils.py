"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

utils/convert_utils.py
"""

MEBIBYTE = 1024 ** 2


class ConvertUtils:
    @staticmethod
    def bytes_to_human(size_bytes: int) -> str:
        """
        Convert bytes to human-readable string (e.g., 1.5KB, 3.2MB).
        """
        if size_bytes < 0:
            return "0B"

        units = ["B", "KB", "MB", "GB", "TB", "PB"]
        for unit in units:
            if size_bytes < 1024:
                return f"{size_bytes:.2f}{unit}"
            size_bytes /= 1024
        return f"{size_bytes:.2f}EB"

    @staticmethod
    def human_to_bytes(size_str: str) -> int:
        """
        Convert human-readable size string to bytes.
        Supports formats: '1.5GB', '2048KB', '1000', '1K', '1M', '1G', etc.
        Raises ValueError for negative sizes or invalid formats.
        """
        size_str = size_str.strip().upper()

        # Define units with both full (KB) and short (K) forms
        units = {
            'PB': 1024 ** 5, 'P': 1024 ** 5,
            'TB': 1024 ** 4, 'T': 1024 ** 4,
            'GB': 1024 ** 3, 'G': 1024 ** 3,
            'MB': 1024 ** 2, 'M': 1024 ** 2,
            'KB': 1024, 'K': 1024,
            'B': 1,
        }

        # Longest suffix first so 'KB' is not read as 'K' + 'B'
        for unit in sorted(units.keys(), key=len, reverse=True):
            if size_str.endswith(unit):
                value_str = size_str[:-len(unit)].strip()
                try:
                    value = float(value_str)
                except ValueError:
                    raise ValueError(f"Invalid numeric value in size: '{value_str}'")

                if value < 0:
                    raise ValueError(f"Negative size not allowed: '{size_str}'")
                return int(value * units[unit])

        # No unit specified, treat as bytes
        try:
            value = int(size_str)
        except ValueError:
            raise ValueError(
                f"Invalid size format: '{size_str}'. "
                f"Supported formats: 1.5GB, 2048KB, 1000, 1K, 1M, etc."
            )

        if value < 0:
            raise ValueError(f"Negative size not allowed: '{size_str}'")
        return value

    @staticmethod
    def megabytes_to_bytes(megabytes: int) -> int:
        """Legacy --maxmb value (MiB) to bytes. 0 stays 0 (unlimited)."""
        if megabytes < 0:
            raise ValueError(f"Negative size not allowed: '{megabytes}'")
        return megabytes * MEBIBYTE

    @staticmethod
    def bytes_to_megabytes(size_bytes: int) -> float:
        return size_bytes / MEBIBYTE

    @staticmethod
    def seconds_to_human(seconds: float) -> str:
        """
        Render a duration the way the run summary prints it: 850ms, 12.40s, 3m05.2s.
        """
        if seconds < 0:
            seconds = 0.0
        if seconds < 1:
            return f"{seconds * 1000:.0f}ms"
        if seconds < 60:
            return f"{seconds:.2f}s"
        minutes, rest = divmod(seconds, 60)
        if minutes < 60:
            return f"{int(minutes)}m{rest:04.1f}s"
        hours, minutes = divmod(int(minutes), 60)
        return f"{hours}h{minutes:02d}m{rest:04.1f}s"
