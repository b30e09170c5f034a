"""Maven 调用

根据清单中的依赖集生成临时 pom.xml 驱动 mvn:
  - install():          mvn install，把依赖下载到本地仓库
  - compute_classpath(): mvn dependency:build-classpath，输出 classpath
  - get_classpath():    经 ResolutionCache 缓存的 classpath

pom.xml 只在 mvn 运行期间存在，无论成功失败都会删除，不污染项目目录。
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from xml.sax.saxutils import escape

from cljsbuild.core.cache import ResolutionCache
from cljsbuild.core.config import ManifestStore
from cljsbuild.core.exceptions import ExternalToolError
from cljsbuild.core.models import DependencyCoordinate, DependencySet
from cljsbuild.utils.shell import CommandExecutor, run_cmd

logger = logging.getLogger(__name__)

POM_FILE = "pom.xml"
CLASSPATH_OUTPUT_FILE = "classpath.out"

_POM_HEADER = """\
<project>
<modelVersion>4.0.0</modelVersion>
<groupId>org.clojars.YOUR-CLOJARS-USERNAME-HERE</groupId>
<artifactId>JAR-NAME-HERE</artifactId>
<version>JAR-VERSION-HERE</version>
<name>JAR-NAME-HERE</name>
<description>JAR-DESCRIPTION-HERE</description>
<licenses>
  <license>
    <name>Eclipse Public License 1.0</name>
    <url>http://opensource.org/licenses/eclipse-1.0.php</url>
    <distribution>repo</distribution>
  </license>
</licenses>
<repositories>
  <repository>
    <id>clojars</id>
    <url>https://repo.clojars.org/</url>
  </repository>
</repositories>"""


def render_pom(dependencies: DependencySet) -> str:
    lines = [_POM_HEADER, "<dependencies>"]
    for name, version in dependencies.items():
        coord = DependencyCoordinate.parse(name)
        lines += [
            "<dependency>",
            f"  <groupId>{escape(coord.group_id)}</groupId>",
            f"  <artifactId>{escape(coord.artifact_id)}</artifactId>",
            f"  <version>{escape(version)}</version>",
            "</dependency>",
        ]
    lines += ["</dependencies>", "</project>", ""]
    return "\n".join(lines)


class Maven:
    """以清单依赖集驱动 mvn"""

    def __init__(
        self,
        store: ManifestStore,
        cache: ResolutionCache | None = None,
        executor: CommandExecutor | None = None,
        mvn: str = "mvn",
    ) -> None:
        self.store = store
        self._cache = cache
        self.executor = executor
        self.mvn = mvn

    @property
    def tempdir(self) -> Path:
        return Path(self.store.get("tempdir")).resolve()

    @property
    def cache(self) -> ResolutionCache:
        if self._cache is None:
            self._cache = ResolutionCache(self.tempdir)
        return self._cache

    @property
    def pom_path(self) -> Path:
        return self.tempdir / POM_FILE

    @contextmanager
    def project_descriptor(self) -> Iterator[Path]:
        """生成 pom.xml，退出时删除（包括异常退出）"""
        pom = self.pom_path
        pom.parent.mkdir(parents=True, exist_ok=True)
        logger.debug("写入 %s", pom)
        pom.write_text(render_pom(self.store.config.dependencies), encoding="utf-8")
        try:
            yield pom
        finally:
            pom.unlink(missing_ok=True)

    def install(self) -> None:
        """mvn install，下载并安装全部依赖"""
        with self.project_descriptor() as pom:
            run_cmd(
                [self.mvn, "install", "-f", str(pom)],
                executor=self.executor, label="mvn install",
            )

    def compute_classpath(self) -> str:
        """调用 mvn 计算 classpath（不经缓存）"""
        output = self.tempdir / CLASSPATH_OUTPUT_FILE
        with self.project_descriptor() as pom:
            try:
                run_cmd(
                    [
                        self.mvn, "dependency:build-classpath",
                        "-f", str(pom),
                        f"-Dmdep.outputFile={output}",
                    ],
                    executor=self.executor, label="mvn dependency:build-classpath",
                )
                if not output.exists():
                    raise ExternalToolError(f"mvn 没有生成 classpath 输出文件: {output}")
                return output.read_text(encoding="utf-8").strip()
            finally:
                output.unlink(missing_ok=True)

    def get_classpath(self) -> str:
        """返回项目 classpath，依赖集未变化时直接使用缓存"""
        return self.cache.get_resolved_paths(
            self.store.config.dependencies, self.compute_classpath,
        )
