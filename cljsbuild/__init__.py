"""cljsbuild - ClojureScript 项目的构建、依赖管理与 REPL 工具"""

__version__ = "0.4.0"
