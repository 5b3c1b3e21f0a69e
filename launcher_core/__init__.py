"""Editor and terminal launching for RepoLauncher."""
