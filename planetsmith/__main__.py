from planetsmith.cli import main

raise SystemExit(main())
