from pygit_stats.cli import main

main()
