"""Translation Stats command line interface."""
