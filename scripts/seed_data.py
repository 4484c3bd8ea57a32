#!/usr/bin/env python3
"""
Seed data script for trying out the spending analytics endpoints.
Creates sample expenses, a few of them soft-deleted, for one user.
"""

import boto3
import os
import sys
from datetime import datetime, timedelta
import random

# Add src directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from expenses.service import ExpenseService

TITLES = {
    'Food': ['Coffee', 'Lunch', 'Groceries', 'Takeaway', 'Bakery'],
    'Transport': ['Metro card', 'Taxi', 'Fuel', 'Parking'],
    'Rent': ['Monthly rent'],
    'Utilities': ['Electricity', 'Water', 'Internet', 'Phone bill'],
    'Entertainment': ['Cinema', 'Concert', 'Streaming'],
    'Health': ['Pharmacy', 'Dentist'],
}

# None stands for an expense recorded without a payment source
PAYMENT_SOURCES = ['Credit Card', 'Debit Card', 'Cash', 'UPI', None]


def get_expenses_table_from_stack(stack_name='spending-analytics'):
    """Get the expenses table name from the CloudFormation stack."""
    cf = boto3.client('cloudformation')

    try:
        response = cf.describe_stacks(StackName=stack_name)
        for output in response['Stacks'][0]['Outputs']:
            if 'Expenses' in output['OutputKey'] and 'Table' in output['OutputKey']:
                return output['OutputValue']
    except Exception as e:
        print(f"Error getting table name from stack: {e}")

    print("Using default table name...")
    return f"{stack_name}-expenses"


def seed_expenses(table_name, user_id, num_expenses=50, days=120, deleted_ratio=0.1):
    """Seed sample expenses spread over the last `days` days."""
    service = ExpenseService(table_name=table_name)

    print(f"Creating {num_expenses} sample expenses...")

    expenses = []
    for _ in range(num_expenses):
        category = random.choice(list(TITLES))
        moment = datetime.utcnow() - timedelta(days=random.randint(0, days), minutes=random.randint(0, 1439))

        expense = service.create_expense(user_id, {
            'title': random.choice(TITLES[category]),
            'amount': round(random.uniform(800.0, 1500.0) if category == 'Rent' else random.uniform(2.0, 150.0), 2),
            'date': moment.isoformat(),
            'category': category,
            'payment_source': random.choice(PAYMENT_SOURCES)
        })
        expenses.append(expense)

    deleted = random.sample(expenses, int(len(expenses) * deleted_ratio))
    for expense in deleted:
        service.delete_expense(user_id, expense['expense_id'])

    print(f"Created {len(expenses)} expenses ({len(deleted)} soft-deleted)")
    return expenses


def main():
    """Main function."""
    print("=" * 50)
    print("Spending Analytics - Seed Data Script")
    print("=" * 50)

    # Get stack name
    stack_name = input("Enter stack name (default: spending-analytics): ").strip()
    if not stack_name:
        stack_name = 'spending-analytics'

    print("\nGetting table name from CloudFormation...")
    table_name = get_expenses_table_from_stack(stack_name)
    print(f"  expenses: {table_name}")

    # Get user ID
    user_id = input("\nEnter user ID (Cognito sub) to seed data for: ").strip()
    if not user_id:
        print("Error: User ID is required")
        sys.exit(1)

    # Get number of expenses
    num_expenses = input("Enter number of expenses to create (default: 50): ").strip()
    num_expenses = int(num_expenses) if num_expenses else 50

    print("\nSeeding expenses...")
    expenses = seed_expenses(table_name, user_id, num_expenses)

    print("\n" + "=" * 50)
    print("Data seeding complete!")
    print("=" * 50)
    print(f"\nCreated {len(expenses)} expenses for user: {user_id}")


if __name__ == '__main__':
    main()
