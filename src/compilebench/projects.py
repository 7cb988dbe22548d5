"""The built-in list of benchmarked projects."""

from __future__ import annotations

from compilebench.project import Project, sbt_project

scalatest = sbt_project("scalatest", "scalatest")
cats = sbt_project("typelevel", "cats")
cats_effect = sbt_project("typelevel", "cats-effect")
fs2 = sbt_project("typelevel", "fs2")
metals = sbt_project("scalameta", "metals")
steve = sbt_project("kubukoz", "steve")
scala_steward = sbt_project("scala-steward", "scala-steward")
smithy4s = sbt_project("disneystreaming", "smithy4s")
weaver = sbt_project("disneystreaming", "weaver-test")
trading = sbt_project("gvolpe", "trading")
zio = sbt_project("zio", "zio")

# Private checkout; never cloned, built inside its nix shell.
work_project = (
    sbt_project("kubukoz", "work-project")
    .with_compile_command(["sbt", "IntegrationTest/compile;Test/compile"])
    .with_command_prefix(["nix", "develop", "--command"])
    .with_clone(False)
)

scala = sbt_project("scala", "scala")
dotty = sbt_project("lampepfl", "dotty")
fs2_aws = sbt_project("laserdisc-io", "fs2-aws")
zio_aws = sbt_project("vigoo", "zio-aws").with_compile_command(
    ["sbt", "-J-XX:+UseG1GC", "-J-Xmx8g", "-J-Xms8g", "-J-Xss16m", "all/compile"]
)

DEFAULT_PROJECTS: list[Project] = [
    scalatest,
    cats,
    cats_effect,
    fs2,
    metals,
    steve,
    scala_steward,
    smithy4s,
    weaver,
    trading,
    zio,
    work_project,
    scala,
    dotty,
    fs2_aws,
    # zio_aws needs 8g of heap; left out of the default run.
]
