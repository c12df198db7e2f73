"""Names of the external programs and the JDK location."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class ToolConfig:
    """External tools used to inspect projects and archives.

    Attributes:
        maven: Maven executable.
        gradle: Gradle executable.
        jar: Archive listing tool for ``.jar`` files.
        jmod: Listing tool for ``.jmod`` files.
        jdk_home: JDK installation whose ``jmods`` can be listed.
    """

    maven: str = "mvn"
    gradle: str = "gradle"
    jar: str = "jar"
    jmod: str = "jmod"
    jdk_home: Optional[Path] = None

    @classmethod
    def from_env(cls) -> "ToolConfig":
        """Build a configuration from ``CLASSPATH_TRACKER_*`` and ``JAVA_HOME``."""
        java_home = os.environ.get("JAVA_HOME")
        return cls(
            maven=os.environ.get("CLASSPATH_TRACKER_MAVEN", cls.maven),
            gradle=os.environ.get("CLASSPATH_TRACKER_GRADLE", cls.gradle),
            jar=os.environ.get("CLASSPATH_TRACKER_JAR", cls.jar),
            jmod=os.environ.get("CLASSPATH_TRACKER_JMOD", cls.jmod),
            jdk_home=Path(java_home) if java_home else None,
        )
