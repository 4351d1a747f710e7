from poly_watcher.cli import main

raise SystemExit(main())
