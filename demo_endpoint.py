"""
Quick script to run the HaulOps API locally.

Requires SUPABASE_URL and SUPABASE_PUBLISHABLE_KEY in .env.
"""

import uvicorn

if __name__ == "__main__":
    print("=" * 60)
    print("Starting HaulOps Backend")
    print("=" * 60)
    print()
    print("API Endpoints:")
    print("   - Health Check:   GET  http://localhost:8000/health")
    print("   - Operators:      GET  http://localhost:8000/api/operators")
    print("   - Trucks schema:  GET  http://localhost:8000/trucks/schema")
    print("   - Daily volume:   GET  http://localhost:8000/dashboard/daily-volume?days=7")
    print("   - API Docs:            http://localhost:8000/docs")
    print()
    print("=" * 60)

    uvicorn.run("haulops.main:app", host="0.0.0.0", port=8000, reload=True)
