from fwembed.cli import main

raise SystemExit(main())
