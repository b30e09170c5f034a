"""ClojureScript 编译与 REPL

生成 Clojure 驱动脚本 build.clj 并用 java 运行:
  - build / watch: cljs.build.api 编译（watch 持续监听 src）
  - repl:          先编译，再启动浏览器 REPL
  - nrepl:         先编译，再启动 nREPL 服务 (piggieback，可选 cider 中间件)，
                   写出 .repl-port 和伪 project.clj 供编辑器识别，退出时删除

classpath = Maven 解析出的依赖 + tempdir/user (user.clj 自动加载) + src
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from cljsbuild.core.config import ManifestStore
from cljsbuild.core.maven import Maven
from cljsbuild.utils.shell import CommandExecutor, is_available, run_cmd

logger = logging.getLogger(__name__)

REPL_PORT_FILE = ".repl-port"


def _edn_map(options: dict[str, str]) -> str:
    """{"output-to": '"out/main.js"'} -> {:output-to "out/main.js"}，值需预先渲染"""
    return "{" + ", ".join(f":{k} {v}" for k, v in options.items()) + "}"


class ClojureScript:
    """cljs 编译器与 REPL 驱动"""

    def __init__(
        self,
        store: ManifestStore,
        maven: Maven,
        executor: CommandExecutor | None = None,
        java: str = "java",
    ) -> None:
        self.store = store
        self.maven = maven
        self.executor = executor
        self.java = java

    # ---- 路径 ----

    @property
    def tempdir(self) -> Path:
        return Path(self.store.get("tempdir"))

    @property
    def user_dir(self) -> Path:
        return self.tempdir / "user"

    @property
    def user_clj_path(self) -> Path:
        return self.user_dir / "user.clj"

    @property
    def build_clj_path(self) -> Path:
        return self.tempdir / "build.clj"

    @property
    def fake_project_file(self) -> Path:
        return Path(self.store.get("fakeProjectFile"))

    # ---- 脚本生成 ----

    def render_build(self, method: str, production: bool = False) -> str:
        target = self.store.get("target")
        options = {
            "main": f"'{self.store.get('main')}",
            "output-to": json.dumps(target),
            "output-dir": json.dumps(os.path.dirname(target) or "."),
            "asset-path": json.dumps(self.store.get("assetPath")),
        }
        if production:
            options["optimizations"] = ":advanced"
        return "\n".join([
            "(require 'cljs.build.api)",
            "",
            f"(cljs.build.api/{method}",
            f"  {json.dumps(self.store.get('src'))}",
            f"  {_edn_map(options)}",
            ")",
            "",
        ])

    def render_repl(self) -> str:
        output_dir = os.path.dirname(self.store.get("target")) or "."
        return "\n".join([
            "(require 'cljs.repl)",
            "(require 'cljs.build.api)",
            "(require 'cljs.repl.browser)",
            "",
            "(cljs.repl/repl (cljs.repl.browser/repl-env)",
            f"  :watch {json.dumps(self.store.get('src'))}",
            f"  :output-dir {json.dumps(output_dir)}",
            ")",
            "",
        ])

    def render_nrepl(self, cider: bool = False) -> str:
        lines = [
            "(require '[clojure.tools.nrepl.server :as server])",
            "(require '[cemerick.piggieback :as pback])",
        ]
        middleware = "#'pback/wrap-cljs-repl"
        if cider:
            lines.append("(require 'cider.nrepl)")
            middleware += "\n                             (map resolve cider.nrepl/cider-middleware)"
        lines += [
            "",
            "(let [conn (server/start-server",
            "             :handler (apply server/default-handler",
            f"                             {middleware}))]",
            "  ;; .repl-port 供 cider 等编辑器自动连接",
            f"  (spit {json.dumps(REPL_PORT_FILE)} (:port conn))",
            "  ;; 伪 project.clj 让编辑器识别项目根目录",
            f"  (spit {json.dumps(str(self.fake_project_file))} \"\")",
            "",
            "  (println \"nrepl server listening on port\" (:port conn)))",
            "",
        ]
        return "\n".join(lines)

    def render_user(self) -> str:
        """user.clj: 定义 start-repl，通过 piggieback + weasel 进入 cljs REPL"""
        return "\n".join([
            "(require 'cemerick.piggieback)",
            "(require 'weasel.repl.websocket)",
            "",
            "(defn start-repl []",
            "  (cemerick.piggieback/cljs-repl",
            "    (weasel.repl.websocket/repl-env"
            f" :ip {json.dumps(str(self.store.get('replHost')))}"
            f" :port {int(self.store.get('replPort'))})))",
            "",
        ])

    def _write(self, path: Path, content: str) -> None:
        logger.debug("写入 %s", path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")

    # ---- 执行 ----

    def classpath(self) -> str:
        return os.pathsep.join([
            self.maven.get_classpath(),
            str(self.user_dir),
            str(self.store.get("src")),
        ])

    def _run_build_clj(self, use_rlwrap: bool = False) -> None:
        cmd = [self.java, "-cp", self.classpath(), "clojure.main", str(self.build_clj_path)]
        if use_rlwrap and is_available("rlwrap"):
            cmd.insert(0, "rlwrap")
        run_cmd(cmd, executor=self.executor, label="java")

    def build(self, production: bool = False) -> None:
        self._write(self.build_clj_path, self.render_build("build", production))
        self._run_build_clj()

    def watch(self) -> None:
        self._write(self.build_clj_path, self.render_build("watch"))
        self._run_build_clj()

    def repl(self) -> None:
        self.build()
        self._write(self.build_clj_path, self.render_repl())
        self._run_build_clj(use_rlwrap=True)

    def nrepl(self, cider: bool = False) -> None:
        self.build()
        self._write(self.user_clj_path, self.render_user())
        self._write(self.build_clj_path, self.render_nrepl(cider))
        try:
            self._run_build_clj()
        finally:
            for path in (Path(REPL_PORT_FILE), self.fake_project_file):
                path.unlink(missing_ok=True)
