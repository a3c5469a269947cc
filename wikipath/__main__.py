from wikipath.main import main

raise SystemExit(main())
