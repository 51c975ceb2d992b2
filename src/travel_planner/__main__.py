from .presentation.cli import main

raise SystemExit(main())
