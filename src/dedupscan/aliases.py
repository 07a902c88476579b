from dedupscan.core.models import HashAlgorithmName

ALGORITHM_ALIASES = {
    "xxhash": HashAlgorithmName.XXHASH,
    "xxh64": HashAlgorithmName.XXHASH,
    "md5": HashAlgorithmName.MD5,
    "sha256": HashAlgorithmName.SHA256,
}

ALGORITHM_CHOICES = list(ALGORITHM_ALIASES.keys())

ALGORITHM_HELP_TEXT = (
    "Content digest used to compare files:\n"
    "  xxhash, xxh64 : xxHash64 (fastest, default)\n"
    "  md5           : MD5\n"
    "  sha256        : SHA-256 (slowest)\n"
)

EPILOG_TEXT = """
Examples:
  Basic usage - find duplicates in Downloads folder
  %(prog)s -p ~/Downloads

  Only look at photos, skip anything above 500MB, hash 8 files at a time
  %(prog)s -p ~/Pictures -r '\\.jpe?g$' -r '\\.png$' -M 500MB -q 8

  Same as above + keep one copy of every duplicate set in ~/uniq
  %(prog)s -p ~/Pictures -r '\\.jpe?g$' -u ~/uniq

  Save the full result as JSON, with a pre-count for percentage progress
  %(prog)s -p /mnt/nas --precount --json ~/scan.json --verbose
"""
