"""Testing Infrastructure Package.

Provides testing utilities including:
- test_framework: TestSuite runner, colours and logging suppression
- test_utilities: mock drivers, fake driver factories and the standard runner
"""
