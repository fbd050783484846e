"""CinePlanner: weekly cinema hall scheduling grid."""
