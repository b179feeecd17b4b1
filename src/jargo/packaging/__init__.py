"""
The `packaging` sub-package turns compiled output into a distributable JAR.

This includes:
- Orchestrating a build, from staging through javac to archive assembly.
- Merging the optional resources tree into compiled output.
- Writing and reading back JAR archives.
"""
